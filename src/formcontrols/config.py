import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

# tomllib is stdlib in Python 3.11+. Fall back to tomli for older versions.
try:
    import tomllib  # type: ignore
except Exception:  # pragma: no cover - platform dependent
    import tomli as tomllib  # type: ignore

import tomli_w
import tomlkit


def _config_file_path() -> Path:
    xdg = os.getenv('XDG_CONFIG_HOME')
    if xdg:
        base = Path(xdg)
    else:
        base = Path.home() / '.config'
    return base / 'formcontrols' / 'config.toml'


def read_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML file. Raises OSError or ValueError (TOMLDecodeError)."""
    with path.open('rb') as f:
        return tomllib.load(f)


def load_config() -> dict[str, Any]:
    """Load TOML configuration from XDG config path. Returns empty dict on error."""
    p = _config_file_path()
    if not p.exists():
        return {}
    try:
        data = read_toml(p)
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


_ALLOWED_KEYS = {
    'submit_marker': str,
    'picker_var': str,
    'detect_expressions': bool,
}

_CODE_DEFAULTS: dict[str, Any] = {
    'submit_marker': 'submitbutton',
    'picker_var': 'flatpickrOptions',
    'detect_expressions': True,
}


def _parse_bool(raw_value: Any) -> bool:
    if isinstance(raw_value, bool):
        return raw_value
    s = str(raw_value).strip().lower()
    if s in ('1', 'true', 'yes', 'on'):
        return True
    if s in ('0', 'false', 'no', 'off'):
        return False
    raise ValueError(f"Invalid boolean value: {raw_value}")


def _cast(key: str, raw_value: Any) -> Any:
    """Cast raw_value to the type registered for key. Raises ValueError."""
    expected = _ALLOWED_KEYS[key]
    if expected is bool:
        return _parse_bool(raw_value)
    value = str(raw_value).strip()
    if not value:
        raise ValueError(f"Empty value for {key}")
    return value


def save_config(cfg: dict[str, Any]) -> bool:
    """Write a whole config mapping to the XDG config TOML file.

    Returns True on success, False otherwise.
    """
    p = _config_file_path()
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        with p.open('w', encoding='utf8') as f:
            f.write(tomli_w.dumps(cfg))
        return True
    except Exception:
        return False


def set_config_value(key: str, value: Any) -> bool:
    """Set a single config key (with validation) and persist it.

    An existing file is updated in place so comments and ordering survive.
    Returns True on success, False on validation or IO errors.
    """
    if key not in _ALLOWED_KEYS:
        return False
    try:
        cast_v = _cast(key, value)
    except ValueError:
        return False

    p = _config_file_path()
    if not p.exists():
        return save_config({key: cast_v})
    try:
        doc = tomlkit.parse(p.read_text(encoding='utf8'))
        doc[key] = cast_v
        p.write_text(tomlkit.dumps(doc), encoding='utf8')
        return True
    except Exception:
        return False


def get_allowed_keys() -> dict:
    return _ALLOWED_KEYS.copy()


def get_effective_value(key: str, code_default: Any = None) -> dict[str, Any] | None:
    """Return a dict with env/config/code default/effective for a key.

    Returns None if key is not allowed.
    """
    if key not in _ALLOWED_KEYS:
        return None

    env = os.getenv('FORMCONTROLS_' + key.upper())
    cfg = load_config() or {}
    cfg_val = cfg.get(key)
    eff_default = code_default if code_default is not None else _CODE_DEFAULTS[key]

    # compute effective precedence env > config > code_default
    effective: Any = eff_default
    for candidate in (env, cfg_val):
        if candidate is None:
            continue
        try:
            effective = _cast(key, candidate)
            break
        except ValueError:
            continue

    return {'env': env, 'config': cfg_val, 'code_default': eff_default, 'effective': effective}


@dataclass(frozen=True)
class Settings:
    """Rendering settings shared by all controls of a page."""

    submit_marker: str = _CODE_DEFAULTS['submit_marker']
    picker_var: str = _CODE_DEFAULTS['picker_var']
    detect_expressions: bool = _CODE_DEFAULTS['detect_expressions']


def load_settings(overrides: Optional[dict[str, Any]] = None) -> Settings:
    """Resolve Settings from environment, config file and code defaults."""
    values = {}
    for key in _ALLOWED_KEYS:
        eff = get_effective_value(key)
        values[key] = eff['effective'] if eff else _CODE_DEFAULTS[key]
    for key, val in (overrides or {}).items():
        if key in _ALLOWED_KEYS and val is not None:
            values[key] = _cast(key, val)
    return Settings(**values)
