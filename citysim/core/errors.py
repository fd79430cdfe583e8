"""Exception hierarchy for the simulation core.

Player-facing rejections carry a short machine-readable ``reason`` which the
command layer turns into a ``CommandResult``; nothing is mutated before one
of these is raised.
"""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by the core."""

    reason = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.reason)
        self.message = message or self.reason


class InvalidCoordinate(SimulationError):
    reason = "out_of_bounds"


class InsufficientFunds(SimulationError):
    reason = "insufficient_funds"

    def __init__(self, cost: int, available: float) -> None:
        super().__init__(f"Need ${cost}, have ${available:g}")
        self.cost = cost
        self.available = available


class TileOccupied(SimulationError):
    reason = "occupied"


class InvalidCommand(SimulationError):
    """Rejection whose reason is decided by the raiser."""

    def __init__(self, reason: str, message: str = "") -> None:
        self.reason = reason
        super().__init__(message or reason)


class ConfigurationError(SimulationError):
    """Catalog or config cannot describe the world; fatal at startup."""

    reason = "configuration"


class IncompatibleSave(SimulationError):
    """Save file is unreadable or from a different grid size."""

    reason = "incompatible_save"


class UnknownSaveSlot(SimulationError):
    reason = "unknown_slot"
