"""Base exceptions shared across studydocs."""


class StudydocsError(Exception):
    """Base class for all studydocs errors."""

    pass


class ConfigError(StudydocsError):
    """Configuration file is missing or invalid."""

    pass


class RenderError(StudydocsError):
    """A document could not be rendered in the requested output format."""

    pass
