# src/gift_preview/compiler/general/utils/load_config.py
"""
load_config
===========

Does: Read one JSON table from the data directory, either as an ordered
      string list ("list") or as an object ("dict", optionally run through a
      validator), and keep the parsed result until the file's mtime changes.
Data dir: explicit base_dir, else $GIFT_PREVIEW_DATA_DIR / $DATA_DIR, else the
      nearest data/ folder above this module (the packaged tables).
Raises: ConfigFileNotFound, ConfigParseError, ConfigTypeError.
Used by: Lexicon builder, brand policy loader, tests.
"""

from __future__ import annotations

import json
import logging
import os
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Literal

Mode = Literal["list", "dict"]
Validator = Callable[[dict[str, Any]], dict[str, Any]]

__all__ = [
    "Mode",
    "load_config",
    "clear_config_cache",
    "temp_data_dir",
    "ConfigFileNotFound",
    "ConfigParseError",
    "ConfigTypeError",
]

log = logging.getLogger(__name__)


class ConfigFileNotFound(FileNotFoundError):
    """The table (or the data directory holding it) cannot be found or read."""


class ConfigParseError(ValueError):
    """The table is not valid JSON or its validator rejected it."""


class ConfigTypeError(TypeError):
    """The table parsed but has the wrong top-level shape for the mode."""


# ── Cache ────────────────────────────────────────────────────────────────────
_DATA_DIR_ENV_VARS = ("GIFT_PREVIEW_DATA_DIR", "DATA_DIR")
_lock = threading.RLock()
_cache: dict[tuple[Path, float, str, Validator | None], Any] = {}


def clear_config_cache() -> None:
    with _lock:
        _cache.clear()
    log.debug("config cache cleared")


# ── Resolution ───────────────────────────────────────────────────────────────
def _data_dir(base_dir: Path | None) -> Path:
    if base_dir is not None:
        return base_dir.resolve()
    for var in _DATA_DIR_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return Path(value).expanduser().resolve()
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "data").is_dir():
            return (parent / "data").resolve()
    raise ConfigFileNotFound(f"no data/ directory above {here}")


def _table_path(file: str | os.PathLike[str], data_dir: Path) -> Path:
    name = os.fspath(file)
    if not name.endswith(".json"):
        name += ".json"
    path = (data_dir / name).resolve()
    if data_dir not in path.parents:
        raise ConfigFileNotFound(f"{name!r} resolves outside the data dir {data_dir}")
    if not path.is_file():
        raise ConfigFileNotFound(f"table not found: {path}")
    return path


# ── Coercion ─────────────────────────────────────────────────────────────────
def _as_list(data: Any, path: Path) -> tuple[str, ...]:
    if not isinstance(data, list):
        raise ConfigTypeError(f"{path.name}: expected a JSON list, got {type(data).__name__}")
    bad = [type(x).__name__ for x in data if not isinstance(x, (str, int, float))]
    if bad:
        raise ConfigTypeError(f"{path.name}: list entries must be scalars (found {', '.join(bad[:3])})")
    return tuple(str(x) for x in data)


def _as_dict(data: Any, path: Path, validator: Validator | None) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ConfigTypeError(f"{path.name}: expected a JSON object, got {type(data).__name__}")
    if validator is None:
        return data
    try:
        return validator(data)
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise ConfigParseError(f"{path.name}: {e}") from e


# ── Public API ───────────────────────────────────────────────────────────────
def load_config(
    file: str | os.PathLike[str],
    mode: Mode = "dict",
    *,
    base_dir: Path | None = None,
    validator: Validator | None = None,
) -> Any:
    """
    Does: Load <data>/<file>.json in the given mode.
    Returns: tuple[str, ...] for "list", dict for "dict".
    """
    if mode not in ("list", "dict"):
        raise ValueError(f"unknown mode {mode!r}")
    path = _table_path(file, _data_dir(base_dir))
    try:
        key = (path, path.stat().st_mtime, mode, validator)
    except OSError as e:
        raise ConfigFileNotFound(f"cannot stat {path}: {e}") from e

    with _lock:
        if key in _cache:
            return _cache[key]

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigParseError(f"invalid JSON in {path.name}: {e}") from e
    except OSError as e:
        raise ConfigFileNotFound(f"cannot read {path}: {e}") from e

    result = _as_list(data, path) if mode == "list" else _as_dict(data, path, validator)
    with _lock:
        _cache[key] = result
    log.debug("loaded table %s (mode=%s)", path.name, mode)
    return result


@contextmanager
def temp_data_dir(path: os.PathLike[str] | str) -> Iterator[Path]:
    """Does: Point $GIFT_PREVIEW_DATA_DIR at `path` for the block, with a clean cache on both sides."""
    var = _DATA_DIR_ENV_VARS[0]
    previous = os.environ.get(var)
    os.environ[var] = os.fspath(path)
    clear_config_cache()
    try:
        yield Path(path)
    finally:
        if previous is None:
            os.environ.pop(var, None)
        else:
            os.environ[var] = previous
        clear_config_cache()
