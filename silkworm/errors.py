"""Exception types shared by the compiler and the flow calculator."""


class SilkwormError(Exception):
    """Base class for all silkworm errors."""

    pass


class InputError(SilkwormError, ValueError):
    """Raised when a list-level or parameter-level input is invalid.

    Fatal to the call: no partial output is produced.
    """

    pass


class ConfigError(SilkwormError):
    """Raised when configuration validation fails."""

    pass
