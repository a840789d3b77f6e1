"""Form controls and the submission readers they consult."""
from .input import Input
from .submission import MappingSubmission, NoSubmission, SubmissionReader, sanitize_value

__all__ = [
    'Input',
    'MappingSubmission',
    'NoSubmission',
    'SubmissionReader',
    'sanitize_value',
]
