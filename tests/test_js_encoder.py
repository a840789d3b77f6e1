import json

from formcontrols.utils.js_encoder import RawExpression, encode_options, is_raw_expression


def test_plain_values_encode_like_compact_json():
    opts = {"a": 1, "b": "text"}
    assert encode_options(opts) == '{"a":1,"b":"text"}'
    assert encode_options(opts) == json.dumps(opts, separators=(",", ":"))


def test_empty_and_none_encode_to_empty_object():
    assert encode_options({}) == "{}"
    assert encode_options(None) == "{}"


def test_function_text_is_embedded_unquoted():
    out = encode_options({"onOpen": "function(d){doThing(d)}"})
    assert out == '{"onOpen":function(d){doThing(d)}}'


def test_date_and_query_selector_are_detected():
    out = encode_options({
        "minDate": "new Date()",
        "appendTo": 'document.querySelector("#picker")',
        "dateFormat": "Y-m-d",
    })
    assert out == '{"minDate":new Date(),"appendTo":document.querySelector("#picker"),"dateFormat":"Y-m-d"}'


def test_list_items_are_handled_individually():
    out = encode_options({"disable": ["new Date(2020, 0, 1)", "2020-02-02", 3]})
    assert out == '{"disable":[new Date(2020, 0, 1),"2020-02-02",3]}'


def test_nested_mappings_keep_structure():
    out = encode_options({"locale": {"firstDayOfWeek": 1, "onChange": RawExpression("handler")}})
    assert out == '{"locale":{"firstDayOfWeek":1,"onChange":handler}}'


def test_tagged_values_work_without_detection():
    out = encode_options(
        {"appendTo": RawExpression("document.body"), "note": "new Date()"},
        detect_expressions=False,
    )
    # only the tagged value is raw once detection is off
    assert out == '{"appendTo":document.body,"note":"new Date()"}'


def test_placeholder_lookalikes_in_data_stay_quoted():
    out = encode_options({"a": "{{b}}", "b": RawExpression("x()")})
    assert out == '{"a":"{{b}}","b":x()}'


def test_script_close_tag_is_escaped():
    out = encode_options({"a": "</script><script>alert(1)</script>"})
    assert "</script>" not in out
    assert out == '{"a":"<\\/script><script>alert(1)<\\/script>"}'


def test_is_raw_expression():
    assert is_raw_expression(RawExpression("anything"))
    assert is_raw_expression("new   Date(2021, 1, 1)")
    assert not is_raw_expression("new Date()", detect_expressions=False)
    assert not is_raw_expression("a date")
    assert not is_raw_expression(5)
