"""Colour & label helpers for task states.

Decisions:
- Stored state names ("InProgress") never reach the screen; state_label maps
  them to display text.
- Colours are hex values rendered through click.style as truecolor.
- Honors NO_COLOR for complete disable and FORCE_COLOR to keep styling when
  stdout is not a TTY (otherwise click strips it).
- Palette overrides: TODO_COLOR_PRIMARY, TODO_COLOR_NEW,
  TODO_COLOR_INPROGRESS, TODO_COLOR_DONE.
"""
from __future__ import annotations
import os
from typing import Dict, Optional, Tuple

import click

from models import TaskState

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None

HEX_PRIMARY_DEFAULT = '#476EAE'
HEX_NEW_DEFAULT = '#48B3AF'
HEX_INPROGRESS_DEFAULT = '#F6FF99'
HEX_DONE_DEFAULT = '#A7E399'

STATE_LABELS: Dict[TaskState, str] = {
    TaskState.NEW: "New",
    TaskState.IN_PROGRESS: "In progress",
    TaskState.DONE: "Done",
}

STATE_MARKERS: Dict[TaskState, str] = {
    TaskState.NEW: "[ ]",
    TaskState.IN_PROGRESS: "[~]",
    TaskState.DONE: "[x]",
}


def _hex_to_rgb(hex_code: str) -> Tuple[int, int, int]:
    """Convert a hex colour code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _valid_hex(value: Optional[str]) -> bool:
    if not value:
        return False
    h = value.strip().lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)


def _palette_color(env_key: str, default: str) -> Tuple[int, int, int]:
    override = os.environ.get(env_key)
    return _hex_to_rgb(override.strip() if _valid_hex(override) else default)  # type: ignore[union-attr]


PRIMARY = _palette_color('TODO_COLOR_PRIMARY', HEX_PRIMARY_DEFAULT)
STATE_COLOR: Dict[TaskState, Tuple[int, int, int]] = {
    TaskState.NEW: _palette_color('TODO_COLOR_NEW', HEX_NEW_DEFAULT),
    TaskState.IN_PROGRESS: _palette_color('TODO_COLOR_INPROGRESS', HEX_INPROGRESS_DEFAULT),
    TaskState.DONE: _palette_color('TODO_COLOR_DONE', HEX_DONE_DEFAULT),
}


def state_label(state: TaskState) -> str:
    return STATE_LABELS[state]


def state_color(state: TaskState) -> Tuple[int, int, int]:
    return STATE_COLOR[state]


def echo_color() -> Optional[bool]:
    """Value for click.echo(color=...): None lets click decide per stream."""
    if _NO_COLOR:
        return False
    return True if _FORCE else None


def color(text: str, fg=None, bold: Optional[bool] = None, dim: Optional[bool] = None) -> str:
    """Apply styles to text unless NO_COLOR is set."""
    if _NO_COLOR:
        return text
    return click.style(text, fg=fg, bold=bold, dim=dim)


__all__ = [
    'STATE_LABELS', 'STATE_MARKERS', 'STATE_COLOR', 'PRIMARY',
    'state_label', 'state_color', 'echo_color', 'color',
]
