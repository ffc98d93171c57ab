"""memberfiles - file access authorization for membership organizations."""

__version__ = "0.1.0"
