from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import Any, Optional

import click

from formcontrols.config import load_settings, read_toml
from formcontrols.controls.input import Input
from formcontrols.controls.submission import MappingSubmission
from formcontrols.managers.datetime_sequence import DatetimeSequence

logger = logging.getLogger(__name__)


def _load_document(path: str) -> Any:
    """Read a TOML or JSON document; the suffix decides, JSON is the default."""
    p = Path(path)
    try:
        if p.suffix.lower() == '.toml':
            return read_toml(p)
        with p.open('r', encoding='utf8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Cannot read {path}: {e}") from e


def _controls_from_document(doc: Any) -> list[dict[str, Any]]:
    if isinstance(doc, list):
        controls = doc
    elif isinstance(doc, dict) and isinstance(doc.get('controls'), list):
        controls = doc['controls']
    elif isinstance(doc, dict):
        controls = [doc]
    else:
        raise click.ClickException('Expected a control table or a "controls" array')
    return [c for c in controls if isinstance(c, dict)]


def _parse_pairs(pairs: tuple[str, ...]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for pair in pairs:
        if '=' not in pair:
            raise click.BadParameter(f"expected KEY=VALUE, got {pair!r}", param_hint='--submit')
        key, value = pair.split('=', 1)
        # repeated keys become multi-valued, like a posted checkbox group
        if key in data:
            prev = data[key]
            data[key] = (prev if isinstance(prev, list) else [prev]) + [value]
        else:
            data[key] = value
    return data


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """formcontrols CLI: render form controls and inspect their configuration."""
    from formcontrols.utils.logging_config import setup_cli_logging

    # Store flags in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet

    setup_cli_logging(verbose=verbose, quiet=quiet)


def main():
    cli()


@cli.command('render')
@click.argument('config_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--submit', 'submitted', multiple=True, help='Simulate a submitted field as KEY=VALUE (repeatable)')
@click.option('--tabindex', type=int, default=None, help='Tab index of the first control')
@click.option('--seed', type=int, default=None, help='Seed for the address field name suffix')
def render_cmd(config_file: str, submitted: tuple[str, ...], tabindex: Optional[int], seed: Optional[int]):
    """Render the control(s) described in CONFIG_FILE (TOML or JSON) as HTML."""
    from formcontrols.utils.json_schema import check_control_config

    settings = load_settings()
    controls = _controls_from_document(_load_document(config_file))
    if not controls:
        click.echo('No controls found', err=True)
        return

    submission = None
    if submitted:
        data = _parse_pairs(submitted)
        data.setdefault(settings.submit_marker, '')
        submission = MappingSubmission(data, submit_marker=settings.submit_marker)

    sequence = DatetimeSequence()
    rng = random.Random(seed) if seed is not None else None

    parts = []
    for offset, params in enumerate(controls):
        for problem in check_control_config(params):
            logger.warning(f"{config_file}: {problem}")
        control = Input(params, submission=submission, sequence=sequence, rng=rng, settings=settings)
        parts.append(control.get_html(tabindex + offset if tabindex is not None else None))

    click.echo('\n'.join(parts))


@cli.command('encode')
@click.argument('options_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--raw', 'raw_keys', multiple=True, help='Treat this top-level key as a raw script expression (repeatable)')
@click.option('--no-detect', is_flag=True, help='Only honour --raw; do not guess expressions from their text')
def encode_cmd(options_file: str, raw_keys: tuple[str, ...], no_detect: bool):
    """Encode a picker options mapping as a script object literal."""
    from formcontrols.utils.js_encoder import RawExpression, encode_options

    options = _load_document(options_file)
    if not isinstance(options, dict):
        raise click.ClickException('Expected an options mapping')

    for key in raw_keys:
        if key not in options:
            click.echo(f"Unknown option key: {key}", err=True)
            continue
        options[key] = RawExpression(str(options[key]))

    detect = load_settings().detect_expressions and not no_detect
    click.echo(encode_options(options, detect_expressions=detect))


@cli.command('schema')
def schema_cmd():
    """Print the JSON Schema of the recognized control attributes."""
    from formcontrols.utils.json_schema import control_json_schema

    click.echo(json.dumps(control_json_schema(), indent=2, sort_keys=True))


@cli.group('config')
def config_group():
    """Manage persistent configuration (XDG config)."""
    pass


@config_group.command('set')
@click.argument('key', type=str)
@click.argument('value', type=str)
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
def config_set(key: str, value: str, yes: bool):
    """Set a config key. Supported keys: submit_marker, picker_var, detect_expressions"""
    from formcontrols.config import set_config_value, get_allowed_keys, _config_file_path

    allowed = get_allowed_keys()
    if key not in allowed:
        click.echo(f'Unsupported config key: {key}')
        return

    if not yes:
        click.echo(f'About to set {key} in {_config_file_path()} to {value}')
        if not click.confirm('Proceed?'):
            click.echo('Aborted.')
            return

    ok = set_config_value(key, value)
    if ok:
        click.echo(f'Set {key} = {value}')
    else:
        click.echo('Failed to set config (validation or IO error)')


@config_group.command('get')
@click.argument('key', type=str)
@click.option('--defaults', is_flag=True, help='Show environment/config/code defaults for the key')
def config_get(key: str, defaults: bool):
    """Print the effective value of a config key."""
    from formcontrols.config import get_effective_value

    eff = get_effective_value(key)
    if not eff:
        click.echo(f'Unsupported config key: {key}')
        return

    if defaults:
        click.echo(f"env: {eff.get('env')}")
        click.echo(f"config: {eff.get('config')}")
        click.echo(f"code_default: {eff.get('code_default')}")
        click.echo(f"effective: {eff.get('effective')}")
        return

    click.echo(eff['effective'])
