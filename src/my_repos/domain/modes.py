from __future__ import annotations
"""Modes an operator can run against every discovered repository."""

from enum import Enum


class Mode(str, Enum):
    STATUS = "status"
    LOG = "log"
    PULL = "pull"
    FETCH = "fetch"
    NOP = "nop"
    SUMMARY = "summary"

    @property
    def has_post_scan(self) -> bool:
        return self is Mode.SUMMARY


DEFAULT_MODE = Mode.STATUS


def parse_mode(name: str | None) -> Mode | None:
    """Return the mode named `name`, or `None` when it is not recognized."""
    if name is None:
        return None
    try:
        return Mode(name)
    except ValueError:
        return None
