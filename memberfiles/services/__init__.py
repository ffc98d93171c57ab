"""Services for memberfiles."""

from .files import FileService, FileOutcome

__all__ = ["FileService", "FileOutcome"]
