"""Error types raised by the reminder engine."""


class DiapetsError(Exception):
    """Base class for reminder engine errors."""


class InvalidArgument(DiapetsError, ValueError):
    """Raised when a caller passes malformed selection input."""


class TransportFailure(DiapetsError):
    """Delivery to a single push address failed."""

    def __init__(self, address: str, reason: str) -> None:
        super().__init__(f"Push delivery to {mask_address(address)} failed: {reason}")
        self.address = address
        self.reason = reason


class LedgerWriteFailure(DiapetsError):
    """The notification ledger could not persist an entry."""


class PetDataUnavailable(DiapetsError):
    """Pet or caretaker data could not be loaded for dispatch."""


def mask_address(address: str) -> str:
    """Return a log-safe prefix of a push address."""
    return f"{address[:9]}..."
