"""HTML <input> control.

An Input is built once per field per request from a sparse dict of
attributes. Supported attributes:

    checked {bool}
    css_class {str} (alias: class)
    description {str} - explanatory text displayed next to the control
    disabled {bool}
    id {str} - REQUIRED for radio/checkbox inputs
    inputmode {str}
    label {str}
    max, min {number}
    maxlength, minlength {int}
    message {str} - shown for an invalid control; {{label}} is substituted
    name {str} - REQUIRED for all inputs; radio/checkbox groups share one name
    pattern {str}
    picker_options {dict} - datetime picker options (aliases:
        datetime_picker_options, flatpickr_options)
    placeholder {str}
    readonly {bool}
    required {bool}
    type {str} - default 'text'
    value {str} - REQUIRED for radio/checkbox inputs

Misconfiguration never raises. Each problem is logged, kept in
``Input.warnings`` and rendered inline ahead of the control's markup.
"""
from __future__ import annotations

import html
import logging
import random
import re
from dataclasses import dataclass
from typing import Any, Optional

from ..config import Settings
from ..managers.datetime_sequence import DatetimeSequence, get_default_sequence
from ..utils.js_encoder import encode_options
from .submission import NoSubmission, SubmissionReader

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    'checked': False,
    'css_class': '',
    'description': '',
    'disabled': False,
    'id': '',
    'inputmode': '',
    'label': '',
    'max': None,
    'maxlength': None,
    'message': 'Please provide a valid {{label}}',
    'min': None,
    'minlength': None,
    'name': '',
    'pattern': '',
    'picker_options': {},
    'placeholder': '',
    'readonly': False,
    'required': False,
    'type': 'text',
    'value': '',
}

TYPE_DEFAULTS: dict[str, dict[str, str]] = {
    'email': {'pattern': r'[^@]+@[^@]+\.[^@]+'},
    'number': {'pattern': r'^[0-9.-]+$'},
    'url': {
        'pattern': r'^(https?|ftp)://[^\s/$.?#].[^\s]*$',
        'description': 'Include &ldquo;http://&rdquo; or &ldquo;https://&rdquo;',
    },
    'checkbox': {'message': 'Please select one or more options'},
    'radio': {'message': 'Please select an option'},
}

ALIASES = {
    'class': 'css_class',
    'datetime_picker_options': 'picker_options',
    'flatpickr_options': 'picker_options',
}

GROUP_TYPES = ('checkbox', 'radio')

INITIAL = 'initial'
SUBMITTED = 'submitted'


def normalize_name(name: Any) -> str:
    """Strip the '[]' suffix that checkbox groups carry when posted."""
    name = '' if name is None else str(name)
    if name.endswith('[]'):
        return name[:-2]
    return name


def _ucfirst(text: str) -> str:
    return text[:1].upper() + text[1:]


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _attr(value: Any) -> str:
    return html.escape('' if value is None else str(value), quote=True)


@dataclass(frozen=True)
class ControlWarning:
    """A misconfiguration found while building a control."""

    message: str
    markup: str


class Input:
    """A single form control whose value survives a form submission."""

    def __init__(
        self,
        params: Optional[dict[str, Any]] = None,
        submission: Optional[SubmissionReader] = None,
        sequence: Optional[DatetimeSequence] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[Settings] = None,
    ):
        """Resolve configuration, check it and resolve the current value.

        Args:
            params: Control attributes; unrecognized keys are ignored.
            submission: Source of submitted values (default: nothing submitted).
            sequence: Index source for datetime controls (default: process-wide).
            rng: Random source for the address field name suffix.
            settings: Rendering settings (default: code defaults).
        """
        params = {ALIASES.get(k, k): v for k, v in (params or {}).items()}

        self.submission = submission or NoSubmission()
        self.settings = settings or Settings()
        self._rng = rng or random.Random()

        self.is_valid = True
        self.warnings: list[ControlWarning] = []
        self.picker_index: Optional[int] = None
        self.submitted_value: Optional[str] = None

        self._defaults = self._get_defaults(params.get('type'))
        ignored = sorted(k for k in params if k not in DEFAULTS)
        if ignored:
            logger.debug(f"Ignoring unrecognized control attributes: {', '.join(ignored)}")

        options = dict(self._defaults)
        options.update((k, v) for k, v in params.items() if k in DEFAULTS)
        for key, value in options.items():
            setattr(self, key, value)

        self.name = normalize_name(self.name)
        self.value = '' if self.value is None else str(self.value)
        self.picker_options = self.picker_options or {}
        if not isinstance(self.picker_options, dict):
            self._warn(
                f"picker_options must be a mapping ({self.name})",
                f'<p class="error">ERROR: <em>picker_options</em> must be a mapping ({html.escape(self.name)})</p>',
            )
            self.picker_options = {}
        self.picker_options = dict(self.picker_options)
        self.is_group_member = self.type in GROUP_TYPES

        if self.type == 'datetime':
            self.picker_index = (sequence or get_default_sequence()).next_index()

        self._check_params(params)
        self._set_value()

    def __repr__(self) -> str:
        return f"Input(name={self.name!r}, type={self.type!r}, state={self.state!r})"

    @staticmethod
    def _get_defaults(control_type: Any) -> dict[str, Any]:
        defaults = dict(DEFAULTS)
        defaults.update(TYPE_DEFAULTS.get(control_type, {}))
        return defaults

    def _warn(self, message: str, markup: str) -> None:
        self.warnings.append(ControlWarning(message, markup))
        logger.warning(message)

    def _check_params(self, params: dict[str, Any]) -> None:
        """Report missing required attributes; fill in id and label."""
        if not self.name:
            self._warn(
                'name is required for all input elements.',
                '<p class="error">ERROR: the <em>name</em> attribute is <strong>required</strong> '
                'for all input elements</p>',
            )

        if self.is_group_member:
            field = html.escape(self.name)
            if not self.id:
                self._warn(
                    f'id is required for all radio/checkbox inputs ({self.name})',
                    '<p class="error">ERROR: the <em>id</em> attribute is <strong>required</strong> '
                    f'for all radio/checkbox inputs ({field})</p>',
                )
            if not self.value:
                self._warn(
                    f'value is required for all radio/checkbox inputs ({self.name})',
                    '<p class="error">ERROR: the <em>value</em> attribute is <strong>required</strong> '
                    f'for all radio/checkbox inputs ({field})</p>',
                )
            if params.get('description') is not None or params.get('message') is not None:
                self._warn(
                    f'description and message belong on the radio/checkbox group, not the control ({self.name})',
                    '<p class="error">ERROR: the <em>description</em> and <em>message</em> properties '
                    'should be set when adding a radio/checkbox group of controls to the form '
                    f'({field})</p>',
                )

        if not self.id:
            self.id = self.name
        if not self.label:
            self.label = _ucfirst(self.value if self.is_group_member else self.name)

    def _set_value(self) -> None:
        """Cache the instantiated value; switch to the submitted one when posting."""
        self.instantiated_value = self.value
        self._submitted = self.submission.is_submitted()
        if not self._submitted:
            return

        if self.type == 'address':
            # address inputs are posted under name + a random 5-digit suffix
            pattern = re.compile(re.escape(self.name) + r'\d{5}')
            for key in self.submission.keys():
                if pattern.fullmatch(key):
                    self.submitted_value = self.submission.get(key)
        else:
            self.submitted_value = self.submission.get(self.name)

        self.value = '' if self.submitted_value is None else self.submitted_value
        logger.debug(f"Control {self.name!r} re-populated from submission")

    @property
    def state(self) -> str:
        return SUBMITTED if self._submitted else INITIAL

    def is_checked(self) -> bool:
        """Return True if a radio/checkbox control is, or should be, checked."""
        if self._submitted:
            if self.submitted_value is None:
                return False
            if self.type == 'checkbox':
                return self.instantiated_value in re.split(r',\s*', self.submitted_value)
            if self.type == 'radio':
                return self.submitted_value == self.instantiated_value
            return False
        return bool(self.checked)

    def get_attrs(self, tabindex: Optional[int] = None) -> str:
        """Return the optional html attributes for the control."""
        attrs = ''

        if self.disabled:
            attrs += ' disabled="disabled"'
        if self.inputmode:
            attrs += f' inputmode="{_attr(self.inputmode)}"'
        if self.pattern:
            attrs += f' pattern="{_attr(self.pattern)}"'
        if self.placeholder:
            attrs += f' placeholder="{_attr(self.placeholder)}"'
        if self.required:
            attrs += ' required="required"'
        if self.readonly:
            attrs += ' readonly="readonly"'
        if tabindex:
            attrs += f' tabindex="{int(tabindex)}"'

        if self.type in ('address', 'datetime'):
            attrs += f' data-type="{self.type}"'
        if self.type == 'number':
            if self.max is not None:
                attrs += f' max="{_attr(self.max)}"'
            if self.min is not None:
                attrs += f' min="{_attr(self.min)}"'
        if self.type == 'text':
            if _to_int(self.maxlength):
                attrs += f' maxlength="{_to_int(self.maxlength)}"'
            if _to_int(self.minlength):
                attrs += f' minlength="{_to_int(self.minlength)}"'

        if self.is_group_member and self.is_checked():
            attrs += ' checked="checked"'

        return attrs

    def get_css_classes(self) -> list[str]:
        css_classes = ['control', str(self.type)]
        if self.css_class:
            css_classes.append(str(self.css_class))
        # pretty-checkbox classes
        if self.is_group_member:
            css_classes.extend(['pretty', 'p-default', 'p-pulse'])
            if self.type == 'radio':
                css_classes.append('p-round')
        # invalid radio/checkbox styling belongs to the owning group
        if not self.is_valid and not self.is_group_member:
            css_classes.append('invalid')
        return css_classes

    def length_hint(self) -> str:
        """Describe the minlength/maxlength requirement, or return ''."""
        max_length = _to_int(self.maxlength)
        min_length = _to_int(self.minlength)
        if min_length and max_length:
            return f"{min_length}–{max_length} characters"
        if min_length:
            return f"at least {min_length} characters"
        if max_length:
            return f"no more than {max_length} characters"
        return ''

    def get_description(self) -> str:
        return self.description or self.length_hint()

    def get_message(self) -> str:
        message = re.sub(r'{{(label|name)}}', lambda m: self.label.upper(), self.message or '')
        hint = self.length_hint()
        if self.message == self._defaults['message'] and hint:
            message += f" ({hint})"
        return message

    def get_picker_script(self) -> str:
        """Return the inline script that registers this control's picker options."""
        var = self.settings.picker_var
        index = self.picker_index
        options = encode_options(self.picker_options, detect_expressions=self.settings.detect_expressions)

        lines = ['<script>']
        if index == 0:
            lines.append(f'  var {var} = [];')
        lines.append(f'  function init{_ucfirst(var)}{index}() {{')
        lines.append(f'    {var}[{index}] = {options};')
        lines.append('  }')
        lines.append('</script>')
        return '\n'.join(lines)

    def get_html(self, tabindex: Optional[int] = None) -> str:
        """Return the markup for the control, preceded by any warnings."""
        attrs = self.get_attrs(tabindex)
        css_classes = self.get_css_classes()

        name = self.name
        input_type = self.type
        if input_type == 'checkbox':
            name += '[]'
        elif input_type == 'address':
            # random suffix defeats browser autocomplete
            name += '%05d' % self._rng.randint(1, 99999)
            input_type = 'search'
        elif input_type == 'datetime':
            input_type = 'text'

        label = f'<label for="{_attr(self.id)}">{self.label}</label>'

        if self.is_group_member:
            info = ''
            label = f'<div class="state p-primary-o">{label}</div>'
            value = self.instantiated_value
        else:
            message = self.get_message().replace('"', '&quot;')
            info = f'<p class="description" data-message="{message}">{self.get_description()}</p>'
            value = self.value

        control = (
            f'<input id="{_attr(self.id)}" name="{_attr(name)}" type="{_attr(input_type)}" '
            f'value="{_attr(value)}"{attrs} />'
        )

        if self.type == 'hidden':
            markup = control
        else:
            markup = f'<div class="{" ".join(css_classes)}">{info}{control}{label}</div>'
            if self.type == 'datetime':
                markup += self.get_picker_script()

        return ''.join(w.markup for w in self.warnings) + markup
