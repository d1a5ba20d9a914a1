"""Exception hierarchy shared across scopeguard."""


class ScopeguardError(Exception):
    """Base class for all scopeguard errors."""
    pass
