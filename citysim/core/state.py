"""Mutable authoritative city state — owned by the host, mutated by the engine."""

from __future__ import annotations

from citysim.config import SimulationConfig
from citysim.core.grid import Grid
from citysim.core.models import CityStats
from citysim.core.quests import Quest, starter_quests
from citysim.utils.news import NewsFeed, NewsItem


class SimulationState:
    """The single source of truth for one city session.

    There is no module-level state: everything the engine reads or writes
    hangs off an instance of this class.
    """

    __slots__ = ("grid", "stats", "quests", "goal", "news", "goal_serial")

    def __init__(
        self,
        grid: Grid,
        stats: CityStats,
        quests: list[Quest] | None = None,
        goal: Quest | None = None,
        news: NewsFeed | None = None,
    ) -> None:
        self.grid: Grid = grid
        self.stats: CityStats = stats
        self.quests: list[Quest] = quests if quests is not None else []
        self.goal: Quest | None = goal
        self.news: NewsFeed = news if news is not None else NewsFeed()
        self.goal_serial: int = 0

    @classmethod
    def fresh(cls, config: SimulationConfig) -> SimulationState:
        """A brand-new empty city."""
        return cls(
            grid=Grid(config.grid_size),
            stats=CityStats(
                money=config.initial_money,
                population=0,
                day=1,
                happiness=config.initial_happiness,
            ),
            quests=starter_quests(),
            news=NewsFeed(config.news_limit),
        )

    def find_quest(self, quest_id: str) -> Quest | None:
        for q in self.quests:
            if q.quest_id == quest_id:
                return q
        return None

    def report(self, category: str, message: str) -> NewsItem:
        event = NewsItem(self.stats.day, category, message)
        self.news.append(event)
        return event
