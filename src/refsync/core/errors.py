"""Exceptions raised by refsync."""


class RefsyncError(Exception):
    """Base class for refsync errors."""


class NoteNotFoundError(RefsyncError, KeyError):
    """The note id is not known to the workspace link graph."""

    def __init__(self, note_id: str):
        super().__init__(note_id)
        self.note_id = note_id

    def __str__(self) -> str:
        return f"Note {self.note_id} not found"


class ConfigError(RefsyncError, ValueError):
    """Invalid configuration value."""
