"""Exception hierarchy shared by the converter, watcher, and CLI."""


class Md2WebError(Exception):
    """Base exception for all md2web errors."""


class ValidationError(Md2WebError):
    """Raised when user-supplied paths or options are unusable."""


class ConversionError(Md2WebError):
    """Raised when rendering, writing, or PDF export fails."""


class UnsupportedDirectionError(ConversionError):
    """Raised when a sync is requested for a source format with no converter."""
