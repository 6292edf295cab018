"""Custom exceptions for esh-cli."""


class EshCliError(Exception):
    """Base class for all esh-cli errors."""


class MalformedTagError(EshCliError):
    """Raised when a tag or version string does not match the tag grammar."""

    def __init__(self, message: str, tag: str = None):
        self.tag = tag
        super().__init__(message)


class VersionParseError(MalformedTagError):
    """Raised when a semantic version string cannot be parsed."""


class UnsupportedBumpError(EshCliError):
    """Raised when a bump cannot be applied (unknown kind, wrong tag dialect)."""


class GitOperationError(EshCliError):
    """Raised when a git command fails."""


class ConfigError(EshCliError):
    """Raised when the configuration file cannot be loaded."""


class TagNotFoundError(EshCliError):
    """Raised when a tag an operation depends on does not exist."""


class TagRuleError(EshCliError):
    """Raised when a tagging rule is violated (wrong branch, remote out of sync)."""
