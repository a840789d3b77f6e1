import logging

from formcontrols.controls.input import Input


def test_missing_name_warns_but_builds():
    control = Input({})
    assert len(control.warnings) == 1
    assert "name is required" in control.warnings[0].message
    html = control.get_html()
    assert html.startswith('<p class="error">ERROR: the <em>name</em> attribute')
    assert "<input " in html


def test_missing_name_is_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="formcontrols"):
        Input({"type": "text"})
    assert any("name is required" in r.getMessage() for r in caplog.records)


def test_checkbox_missing_id_and_value():
    control = Input({"name": "opt", "type": "checkbox"})
    messages = [w.message for w in control.warnings]
    assert len(messages) == 2
    assert messages[0].startswith("id is required")
    assert messages[1].startswith("value is required")
    assert all("(opt)" in m for m in messages)
    # best effort defaults
    assert control.id == "opt"


def test_radio_missing_value_only():
    control = Input({"name": "size", "type": "radio", "id": "size-s"})
    assert [w.message for w in control.warnings] == ["value is required for all radio/checkbox inputs (size)"]


def test_group_member_with_description_or_message():
    control = Input({"name": "size", "type": "radio", "id": "s", "value": "s", "description": "Pick one"})
    assert len(control.warnings) == 1
    assert "belong on the radio/checkbox group" in control.warnings[0].message

    control = Input({"name": "size", "type": "checkbox", "id": "s", "value": "s", "message": "Nope"})
    assert len(control.warnings) == 1


def test_complete_group_member_has_no_warnings():
    control = Input({"name": "size", "type": "checkbox", "id": "s", "value": "s"})
    assert control.warnings == []


def test_plain_control_with_description_is_fine():
    control = Input({"name": "city", "description": "Where you live"})
    assert control.warnings == []


def test_picker_options_must_be_a_mapping():
    control = Input({"name": "when", "type": "datetime", "picker_options": ["minDate"]})
    assert [w.message for w in control.warnings] == ["picker_options must be a mapping (when)"]
    assert control.picker_options == {}
    assert "= {};" in control.get_html()


def test_unparseable_lengths_are_ignored():
    control = Input({"name": "user", "maxlength": "ten", "minlength": "3"})
    assert control.length_hint() == "at least 3 characters"
    assert "maxlength" not in control.get_attrs()
