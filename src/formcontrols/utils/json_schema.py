from __future__ import annotations

from typing import Any

import jsonschema

from ..controls.input import DEFAULTS, ALIASES

CONTROL_TYPES = [
    'address',
    'checkbox',
    'datetime',
    'email',
    'hidden',
    'number',
    'radio',
    'text',
    'url',
]

_PROPERTY_TYPES: dict[str, dict[str, Any]] = {
    'checked': {'type': 'boolean'},
    'css_class': {'type': 'string'},
    'description': {'type': 'string'},
    'disabled': {'type': 'boolean'},
    'id': {'type': 'string'},
    'inputmode': {'type': 'string'},
    'label': {'type': 'string'},
    'max': {'type': ['number', 'null']},
    'maxlength': {'type': ['integer', 'null'], 'minimum': 0},
    'message': {'type': 'string'},
    'min': {'type': ['number', 'null']},
    'minlength': {'type': ['integer', 'null'], 'minimum': 0},
    'name': {'type': 'string'},
    'pattern': {'type': 'string'},
    'picker_options': {'type': 'object'},
    'placeholder': {'type': 'string'},
    'readonly': {'type': 'boolean'},
    'required': {'type': 'boolean'},
    # types outside the known list still render as plain <input type=...>
    'type': {'type': 'string', 'examples': CONTROL_TYPES},
    'value': {'type': ['string', 'number']},
}


def control_json_schema() -> dict[str, Any]:
    """Describe the recognized control attributes as a JSON Schema (draft-07).

    Unknown keys are ignored by Input, so additional properties are allowed.
    """
    props: dict[str, Any] = {}
    for key in DEFAULTS:
        prop = dict(_PROPERTY_TYPES.get(key, {}))
        default = DEFAULTS[key]
        if default not in ('', None, {}):
            prop['default'] = default
        props[key] = prop

    for alias, target in ALIASES.items():
        props[alias] = dict(_PROPERTY_TYPES[target])
        props[alias]['description'] = f"Alias for {target}"

    return {
        '$schema': 'http://json-schema.org/draft-07/schema#',
        'title': 'Form control',
        'type': 'object',
        'properties': props,
        'required': ['name'],
        'additionalProperties': True,
    }


def check_control_config(params: Any) -> list[str]:
    """Validate a control config against control_json_schema().

    Returns a list of human-readable problems (empty when valid). Problems are
    advisory: Input still renders a best-effort control.
    """
    validator = jsonschema.Draft7Validator(control_json_schema())
    problems = []
    for err in sorted(validator.iter_errors(params), key=lambda e: [str(p) for p in e.path]):
        where = '.'.join(str(p) for p in err.path) or '<control>'
        problems.append(f"{where}: {err.message}")
    return problems
