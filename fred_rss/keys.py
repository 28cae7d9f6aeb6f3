"""Keyboard actions and the raw key sequences that trigger them."""

from __future__ import annotations

import enum
from typing import Dict, Optional


class Action(enum.Enum):
    QUIT_OR_BACK = "quit-or-back"
    TOGGLE_VIEW = "toggle-view"
    CURSOR_NEXT = "cursor-next"
    CURSOR_PREVIOUS = "cursor-previous"
    UNSELECT = "unselect"
    ACTIVATE = "activate"


ESCAPE = "\x1b"
CTRL_W = "\x17"

KEYMAP: Dict[str, Action] = {
    "q": Action.QUIT_OR_BACK,
    "Q": Action.QUIT_OR_BACK,
    ESCAPE: Action.QUIT_OR_BACK,
    CTRL_W: Action.TOGGLE_VIEW,
    "j": Action.CURSOR_NEXT,
    "\x1b[B": Action.CURSOR_NEXT,
    "\x1bOB": Action.CURSOR_NEXT,
    "k": Action.CURSOR_PREVIOUS,
    "\x1b[A": Action.CURSOR_PREVIOUS,
    "\x1bOA": Action.CURSOR_PREVIOUS,
    "h": Action.UNSELECT,
    "\x1b[D": Action.UNSELECT,
    "\x1bOD": Action.UNSELECT,
    "\r": Action.ACTIVATE,
    "\n": Action.ACTIVATE,
    "l": Action.ACTIVATE,
    "\x1b[C": Action.ACTIVATE,
    "\x1bOC": Action.ACTIVATE,
}


def action_for(key: Optional[str]) -> Optional[Action]:
    """Translate a decoded key sequence, returning None for unbound keys."""
    if not key:
        return None
    return KEYMAP.get(key)
