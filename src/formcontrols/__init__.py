"""formcontrols: render HTML form controls that survive a form submission."""
from .config import Settings, load_settings
from .controls.input import Input, normalize_name
from .controls.submission import MappingSubmission, NoSubmission, SubmissionReader
from .managers.datetime_sequence import DatetimeSequence, get_default_sequence
from .utils.js_encoder import RawExpression, encode_options

__version__ = '0.1.0'

__all__ = [
    'DatetimeSequence',
    'Input',
    'MappingSubmission',
    'NoSubmission',
    'RawExpression',
    'Settings',
    'SubmissionReader',
    'encode_options',
    'get_default_sequence',
    'load_settings',
    'normalize_name',
]
