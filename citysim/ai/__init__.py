"""Citizen navigation."""

from citysim.ai.pathfinding import Pathfinder, find_path

__all__ = ["Pathfinder", "find_path"]
