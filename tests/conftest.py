import logging
import sys
from pathlib import Path

import pytest

# Ensure `src` is on sys.path for tests run from the repository root
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the XDG config at an empty dir and drop FORMCONTROLS_* overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for key in ("SUBMIT_MARKER", "PICKER_VAR", "DETECT_EXPRESSIONS"):
        monkeypatch.delenv(f"FORMCONTROLS_{key}", raising=False)
    yield tmp_path / "xdg"
    # CLI invocations attach handlers bound to CliRunner's temporary streams
    pkg_logger = logging.getLogger("formcontrols")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
    pkg_logger.setLevel(logging.NOTSET)
