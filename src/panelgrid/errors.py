# src/panelgrid/errors.py
from __future__ import annotations
from pathlib import Path
from typing import Optional

__all__ = [
    "PanelgridError",
    "ConfigError",
    "LayoutError",
    "NoMorePanelsError",
    "SessionNotFoundError",
    "StateIOError",
]

class PanelgridError(Exception):
    """Base error for the panelgrid package."""


class ConfigError(PanelgridError):
    """Raised when options or configuration are malformed, conflicting or incomplete."""
    def __init__(self, message: str, option: Optional[str] = None):
        self.option = option
        if option:
            message = f"Option {option}: {message}"
        super().__init__(message)


class LayoutError(PanelgridError):
    """Raised when the requested geometry cannot be realized (e.g., non-positive dimension)."""
    def __init__(self, message: str):
        super().__init__(message)


class NoMorePanelsError(LayoutError):
    """Raised when the panel cursor is advanced past the last panel of a figure."""
    def __init__(self, figure_id: int, rows: int, columns: int):
        self.figure_id = figure_id
        self.rows = rows
        self.columns = columns
        super().__init__(
            f"no more panels: all {rows}x{columns} panels of figure {figure_id} have been visited"
        )


class SessionNotFoundError(PanelgridError):
    """Raised when set/end is requested for a figure that has no subplot layout."""
    def __init__(self, figure_id: int, path: Path | str):
        self.figure_id = figure_id
        self.path = str(path)
        super().__init__(f"No subplot layout for figure {figure_id} (missing {self.path}); run 'begin' first")


class StateIOError(PanelgridError):
    """Raised when a state file cannot be created, written, read or removed."""
    def __init__(self, action: str, path: Path | str, reason: object):
        self.action = action
        self.path = str(path)
        super().__init__(f"Cannot {action} {self.path}: {reason}")
