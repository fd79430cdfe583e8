"""Engine layer: economic tick, undo/redo history, command surface."""

from citysim.engine.history import HistoryManager
from citysim.engine.tick import EconomyTick, TickReport
from citysim.engine.city_engine import CityEngine, CommandResult

__all__ = ["CityEngine", "CommandResult", "EconomyTick", "HistoryManager", "TickReport"]
