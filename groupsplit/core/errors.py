"""Exceptions raised while planning or writing a split."""


class SplitError(Exception):
    """Base class for all splitting failures."""


class ConfigurationError(SplitError):
    """Raised when a split cannot be configured.

    Covers a missing test loader, a non-positive group count and a group
    count that drops to zero once the dependency group is reserved.
    """


class DiscoveryError(SplitError):
    """Raised when tests or files cannot be enumerated.

    Partitioning cannot proceed without its input, so this is never
    recovered from inside the core.
    """


__all__ = ["ConfigurationError", "DiscoveryError", "SplitError"]
