import argparse
import json
import logging
from pathlib import Path

from dynpath.events import EventLog
from dynpath.logger import setup_logging
from dynpath.parsing import parse_files
from dynpath.runner import MissionRunner, MissionRunnerConfig


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a mission sequence on a land/travel/mission scenario.")
    parser.add_argument("land", type=str, help="Land file: 'width height' then 'x y type' per cell.")
    parser.add_argument("travel", type=str, help="Travel file: 'x1-y1,x2-y2 weight' per edge.")
    parser.add_argument("missions", type=str, help="Mission file: radius, start, then objectives.")
    parser.add_argument("output", type=str, help="Transcript output path.")
    parser.add_argument("--no-incremental", action="store_true", help="Rescan the full circle on every step.")
    parser.add_argument(
        "--max-retries",
        type=int,
        default=8,
        help="Consecutive impassable plans before a mission is abandoned. Negative retries forever.",
    )
    parser.add_argument("--strict", action="store_true", help="Fail instead of abandoning an unreachable mission.")
    parser.add_argument("--summary-json", type=str, default="", help="Optional path for run statistics.")
    parser.add_argument("--plot", type=str, default="", help="Optional PNG path for the trajectory plot.")
    parser.add_argument("--show", action="store_true", help="Open the trajectory plot window.")
    parser.add_argument("--log-file", type=str, default="", help="Write logs here instead of stderr.")
    parser.add_argument("--log-level", type=str, default="WARNING")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file or None, args.log_level)

    graph, missions = parse_files(args.land, args.travel, args.missions)
    config = MissionRunnerConfig(
        incremental_reveal=not args.no_incremental,
        max_impassable_retries=None if args.max_retries < 0 else args.max_retries,
        abort_on_unreachable=args.strict,
    )
    log = EventLog()
    runner = MissionRunner(graph, missions, sink=log, config=config)
    logger.info("Running %d objectives on %r.", len(runner.objectives), graph)

    try:
        runner.run()
    finally:
        log.write(args.output)

    stats = runner.stats()
    print(f"Map size: {graph.width}x{graph.height}")
    print(f"Objectives reached: {stats['objectives_reached']}/{len(runner.objectives)}")
    print(f"Moves: {stats['moves']}  Impassable: {stats['impassable_events']}")
    print(f"Transcript: {args.output} ({len(log)} lines)")

    if args.summary_json:
        payload = {"stats": stats, "wizard_choices": runner.wizard_choices, "path": runner.path}
        Path(args.summary_json).write_text(json.dumps(payload, indent=2), encoding="utf-8")

    if args.plot or args.show:
        from dynpath.visualization import show_path_plot

        show_path_plot(runner, save_path=args.plot or None, show=args.show)
    return stats


if __name__ == "__main__":
    main()
