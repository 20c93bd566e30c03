"""
Errors that abort a docset build.
"""


class SetupError(Exception):
    """A setup step failed; the docset cannot be built."""


class ConfigError(SetupError):
    """The configuration file is missing or malformed."""
