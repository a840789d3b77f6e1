import json

from click.testing import CliRunner

from formcontrols.cli.commands import cli
from formcontrols.config import load_config


CONTROLS_TOML = '''
[[controls]]
name = "city"
value = "Golden"
minlength = 2

[[controls]]
name = "opt[]"
type = "checkbox"
id = "opt-a"
value = "a"

[[controls]]
name = "when"
type = "datetime"

[controls.picker_options]
minDate = "new Date()"
'''


def write(tmp_path, name, text):
    p = tmp_path / name
    p.write_text(text)
    return str(p)


def test_render_initial_state(tmp_path):
    path = write(tmp_path, 'controls.toml', CONTROLS_TOML)
    runner = CliRunner()
    result = runner.invoke(cli, ['render', path, '--tabindex', '1'])
    assert result.exit_code == 0
    assert 'value="Golden"' in result.output
    assert 'tabindex="1"' in result.output
    assert 'name="opt[]"' in result.output
    assert 'checked="checked"' not in result.output
    assert 'flatpickrOptions[0] = {"minDate":new Date()};' in result.output


def test_render_submitted_state(tmp_path):
    path = write(tmp_path, 'controls.toml', CONTROLS_TOML)
    runner = CliRunner()
    result = runner.invoke(cli, ['render', path, '--submit', 'city=Denver', '--submit', 'opt[]=a', '--submit', 'opt[]=b'])
    assert result.exit_code == 0
    assert 'value="Denver"' in result.output
    assert 'checked="checked"' in result.output


def test_render_single_json_control(tmp_path):
    path = write(tmp_path, 'control.json', json.dumps({'name': 'token', 'type': 'hidden', 'value': 'x'}))
    runner = CliRunner()
    result = runner.invoke(cli, ['render', path])
    assert result.exit_code == 0
    assert '<input id="token" name="token" type="hidden" value="x" />' in result.output


def test_render_reports_misconfiguration_inline(tmp_path):
    path = write(tmp_path, 'control.json', json.dumps({'type': 'text'}))
    runner = CliRunner()
    result = runner.invoke(cli, ['render', path])
    assert result.exit_code == 0
    assert '<p class="error">ERROR: the <em>name</em> attribute' in result.output


def test_render_unreadable_file(tmp_path):
    path = write(tmp_path, 'broken.json', '{not json')
    runner = CliRunner()
    result = runner.invoke(cli, ['render', path])
    assert result.exit_code != 0
    assert 'Cannot read' in result.output


def test_encode_with_raw_keys(tmp_path):
    path = write(tmp_path, 'opts.json', json.dumps({'appendTo': 'document.body', 'dateFormat': 'Y-m-d'}))
    runner = CliRunner()
    result = runner.invoke(cli, ['encode', path, '--raw', 'appendTo'])
    assert result.exit_code == 0
    assert result.output.strip() == '{"appendTo":document.body,"dateFormat":"Y-m-d"}'


def test_encode_no_detect(tmp_path):
    path = write(tmp_path, 'opts.json', json.dumps({'minDate': 'new Date()'}))
    runner = CliRunner()
    result = runner.invoke(cli, ['encode', path, '--no-detect'])
    assert result.exit_code == 0
    assert result.output.strip() == '{"minDate":"new Date()"}'


def test_schema_is_json():
    runner = CliRunner()
    result = runner.invoke(cli, ['schema'])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data.get('type') == 'object'
    assert 'name' in data.get('properties', {})


def test_config_set_writes_file():
    runner = CliRunner()
    # run set command with --yes to avoid confirmation prompt
    result = runner.invoke(cli, ['config', 'set', 'picker_var', 'pickers', '--yes'])
    assert result.exit_code == 0
    assert load_config().get('picker_var') == 'pickers'


def test_config_set_unsupported_key():
    runner = CliRunner()
    result = runner.invoke(cli, ['config', 'set', 'nope', '1', '--yes'])
    assert 'Unsupported config key: nope' in result.output


def test_config_get_defaults(monkeypatch):
    monkeypatch.setenv('FORMCONTROLS_SUBMIT_MARKER', 'go')
    runner = CliRunner()
    result = runner.invoke(cli, ['config', 'get', 'submit_marker', '--defaults'])
    assert result.exit_code == 0
    assert 'env: go' in result.output
    assert 'code_default: submitbutton' in result.output
    assert 'effective: go' in result.output
