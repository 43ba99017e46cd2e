"""Runtime settings read from the environment, plus logging setup.

Variables:
    TODO_DATA_FILE      path of the JSON task file
    TODO_CLEAR_SCREEN   clear the terminal before each main menu (default on)
    TODO_PAUSE_SECONDS  delay used instead of "press any key" off a TTY
    TODO_LOG_LEVEL      logging level name (default WARNING)
    TODO_LOG_FILE       write logs to this file; unset keeps the terminal free of log output
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from storage import DEFAULT_TASKS_FILE

DEFAULT_PAUSE_SECONDS = 2.0
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_CONFIGURED = False


def _truthy_env(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def _float_env(value: Optional[str], default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


@dataclass
class Settings:
    data_file: Path = DEFAULT_TASKS_FILE
    clear_screen: bool = True
    pause_seconds: float = DEFAULT_PAUSE_SECONDS
    log_level: str = "WARNING"
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        data_file = env.get("TODO_DATA_FILE")
        log_file = env.get("TODO_LOG_FILE")
        return cls(
            data_file=Path(data_file).expanduser() if data_file else DEFAULT_TASKS_FILE,
            clear_screen=_truthy_env(env.get("TODO_CLEAR_SCREEN"), True),
            pause_seconds=_float_env(env.get("TODO_PAUSE_SECONDS"), DEFAULT_PAUSE_SECONDS),
            log_level=(env.get("TODO_LOG_LEVEL") or "WARNING").strip().upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
        )


def _parse_level(level: str, default: int = logging.WARNING) -> int:
    value = getattr(logging, str(level or "").strip().upper(), None)
    return value if isinstance(value, int) else default


def setup_logging(settings: Settings, force: bool = False) -> Optional[str]:
    """Configure root logging once per process.

    Records go to TODO_LOG_FILE when set and are discarded otherwise, so
    tracebacks never land in the interactive menu. Returns a message for the
    operator when the log file cannot be opened (logging is then discarded).
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return None
    _CONFIGURED = True

    root = logging.getLogger()
    level = _parse_level(settings.log_level)
    root.setLevel(level)
    if force:
        for h in list(root.handlers):
            root.removeHandler(h)

    problem: Optional[str] = None
    handler: logging.Handler = logging.NullHandler()
    if settings.log_file is not None:
        try:
            settings.log_file.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        except OSError as exc:
            problem = f"Warning: logging disabled, cannot open {settings.log_file}: {exc}"
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return problem
