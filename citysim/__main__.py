"""Entry point: ``python -m citysim``.

Supports two modes:
  - ``python -m citysim serve``  → Launch the FastAPI server with a ticking city
  - ``python -m citysim cli``    → Headless run for N days, printing stats
"""

from __future__ import annotations

import argparse
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Deterministic City Simulation Engine")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--size", type=int, default=20)
    srv.add_argument("--tick", type=float, default=3.0, help="Seconds between ticks")
    srv.add_argument("--save", type=str, default="city_save.json")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])
    srv.add_argument("--log-file", type=str, default=None)

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless simulation")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--size", type=int, default=20)
    cli.add_argument("--days", type=int, default=30)
    cli.add_argument("--starter", action="store_true", help="Lay out a small starter town first")
    cli.add_argument("--save", type=str, default=None)
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])
    cli.add_argument("--log-file", type=str, default=None)

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from citysim.api.app import create_app
    from citysim.config import SimulationConfig

    config = SimulationConfig(
        world_seed=args.seed,
        grid_size=args.size,
        tick_interval_seconds=args.tick,
        save_file=args.save,
        log_level=args.log_level,
        log_file=args.log_file,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _lay_starter_town(engine) -> None:
    from citysim.core.enums import BuildingKind

    mid = engine.config.grid_size // 2
    layout = [
        (BuildingKind.PARK, mid, mid),
        (BuildingKind.RESIDENTIAL, mid - 1, mid),
        (BuildingKind.RESIDENTIAL, mid + 1, mid),
        (BuildingKind.ROAD, mid, mid + 1),
        (BuildingKind.COMMERCIAL, mid - 1, mid + 1),
    ]
    for kind, x, y in layout:
        result = engine.place(kind, x, y)
        if not result.ok:
            logger.warning("Starter %s at (%d, %d) rejected: %s", kind.name, x, y, result.reason)


def _run_cli(args: argparse.Namespace) -> None:
    from citysim.config import SimulationConfig
    from citysim.engine.city_engine import CityEngine
    from citysim.utils.logging import setup_logging
    from citysim.utils.storage import save_game

    config = SimulationConfig(
        world_seed=args.seed, grid_size=args.size, log_level=args.log_level, log_file=args.log_file,
    )
    setup_logging(config.log_level, config.log_file)

    engine = CityEngine(config)
    if args.starter:
        _lay_starter_town(engine)

    logger.info("=== Simulation started (seed=%d, %dx%d) ===", config.world_seed, config.grid_size, config.grid_size)
    for _ in range(args.days):
        report = engine.tick()
        if report.upgrades or report.goal_completed or report.quests_completed:
            logger.info(
                "Day %d: +$%d, %d upgrades, goal=%s, quests=%s",
                report.day, report.income, len(report.upgrades),
                report.goal_completed, report.quests_completed,
            )

    stats = engine.state.stats
    logger.info(
        "=== Finished on day %d: $%d, population %d ===",
        stats.day, stats.money, stats.population,
    )
    if args.save:
        save_game(args.save, engine.state)


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
