from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Iterable, List


def _sep() -> str:
    return ';' if os.name == 'nt' else ':'


# Defaults
_DEFAULT_PROMPT = 'lispy> '
_DEFAULT_LOG_LEVEL = 'WARNING'


def paths_from_env(var: str, defaults: Iterable[Path]) -> List[Path]:
    raw = os.environ.get(var)
    if not raw:
        return [Path(p) for p in defaults]
    sep = _sep()
    return [Path(p.strip()) for p in raw.split(sep) if p.strip()]


def get_prompt() -> str:
    return os.environ.get('LISPY_PROMPT', _DEFAULT_PROMPT)


def get_log_level() -> int:
    raw = os.environ.get('LISPY_LOG_LEVEL', _DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    # getLevelName hands back a "Level X" string for unknown names
    return level if isinstance(level, int) else logging.WARNING


def get_recursion_limit() -> int | None:
    raw = os.environ.get('LISPY_RECURSION_LIMIT')
    if not raw:
        return None
    try:
        limit = int(raw)
    except ValueError:
        return None
    return limit if limit > 0 else None


def get_prelude_paths() -> List[Path]:
    return paths_from_env('LISPY_PRELUDE_PATH', [])
