"""Logging setup for formcontrols.

Library code only ever calls ``logging.getLogger(__name__)``; handlers are
attached here, by the CLI or by an embedding application.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

PACKAGE_LOGGER = 'formcontrols'
DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CLI_FORMAT = '%(levelname)s: %(message)s'


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    console_output: bool = True,
    format_string: Optional[str] = None
) -> logging.Logger:
    """Attach handlers to the formcontrols package logger.

    Args:
        level: Logging level for the package logger and its handlers.
        log_file: Optional path to also write log records to.
        console_output: Whether to log to stderr.
        format_string: Custom format string (uses DEFAULT_FORMAT if None).

    Returns:
        The configured package logger.
    """
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    pkg_logger.setLevel(level)
    # repeated setup (e.g. several CLI invocations in one test run) must not stack handlers
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        pkg_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        pkg_logger.addHandler(file_handler)

    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())

    return pkg_logger


def setup_cli_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Logging for the command line: WARNING by default so misconfiguration
    warnings reach stderr, DEBUG with --verbose, ERROR only with --quiet.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    return setup_logging(level=level, console_output=True, format_string=CLI_FORMAT)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
