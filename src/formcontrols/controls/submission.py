"""Submission readers: where controls look up previously-posted values.

A control never touches the request itself. It is handed a SubmissionReader
that answers three questions: was a form submitted, what value was posted
under a name, and which names were posted at all.
"""
import re
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional
from urllib.parse import parse_qs

_TAG_RE = re.compile(r'<[^>]*>')


def sanitize_value(value: Any) -> str:
    """Reduce a posted value to a trimmed, tag-free string.

    Lists (multi-valued fields such as checkbox groups) are joined with ', '.
    """
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        return ', '.join(sanitize_value(v) for v in value if v is not None)
    return _TAG_RE.sub('', str(value)).strip()


class SubmissionReader(ABC):
    """Abstract base class for submission sources."""

    @abstractmethod
    def is_submitted(self) -> bool:
        """Return True if a form was submitted with the current request."""
        pass

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Return the sanitized value posted under ``name``, or None if absent."""
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """Return the names of all submitted fields."""
        pass


class NoSubmission(SubmissionReader):
    """Reader for a request that carries no form data."""

    def is_submitted(self) -> bool:
        return False

    def get(self, name: str) -> Optional[str]:
        return None

    def keys(self) -> list[str]:
        return []


class MappingSubmission(SubmissionReader):
    """Reader backed by a mapping of field names to posted values.

    Values may be strings or lists of strings, i.e. the output of
    ``urllib.parse.parse_qs`` works as-is. The form counts as submitted when
    ``submit_marker`` (the submit button's name) is among the keys.
    """

    DEFAULT_SUBMIT_MARKER = 'submitbutton'

    def __init__(self, data: Optional[Mapping[str, Any]] = None, submit_marker: str = DEFAULT_SUBMIT_MARKER):
        self._data: dict[str, Any] = dict(data or {})
        self.submit_marker = submit_marker

    @classmethod
    def from_query_string(cls, body: str, submit_marker: str = DEFAULT_SUBMIT_MARKER) -> 'MappingSubmission':
        """Build a reader from an application/x-www-form-urlencoded body."""
        return cls(parse_qs(body, keep_blank_values=True), submit_marker=submit_marker)

    def is_submitted(self) -> bool:
        return self.submit_marker in self._data

    def get(self, name: str) -> Optional[str]:
        # checkbox groups post as name[]
        for key in (name, name + '[]'):
            if key in self._data:
                return sanitize_value(self._data[key])
        return None

    def keys(self) -> list[str]:
        return list(self._data.keys())
