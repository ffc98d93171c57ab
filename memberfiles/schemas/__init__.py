"""API schemas for memberfiles."""

from .common import PaginatedResponse, PaginationParams
from .files import FileCreate, FileSummary

__all__ = [
    "FileCreate",
    "FileSummary",
    "PaginatedResponse",
    "PaginationParams",
]
