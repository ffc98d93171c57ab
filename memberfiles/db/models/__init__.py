"""Database models for memberfiles."""

from memberfiles.db.models.file import File
from memberfiles.db.models.file_access_log import FileAccessLog

__all__ = [
    "File",
    "FileAccessLog",
]
