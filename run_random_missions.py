import argparse
from pathlib import Path

from MapGenerator import MapGenerator, visualize_map
from dynpath.events import EventLog
from dynpath.parsing import graph_from_type_grid, grid_edges, write_land_file, write_mission_file, write_travel_file
from dynpath.runner import MissionRunner


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run missions on a randomly generated gated map.")
    parser.add_argument("--height", type=int, default=20)
    parser.add_argument("--width", type=int, default=30)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--gates", type=int, default=3)
    parser.add_argument("--missions", type=int, default=4)
    parser.add_argument("--radius", type=int, default=2)
    parser.add_argument("--export", type=str, default="", help="Directory to write land/travel/mission files.")
    parser.add_argument("--no-plot", action="store_true", help="Do not open matplotlib window.")
    args = parser.parse_args(argv)

    gen = MapGenerator(height=args.height, width=args.width, seed=args.seed)
    grid = gen.generate_map(num_gates=args.gates)
    missions = gen.generate_missions(grid, count=args.missions, radius=args.radius)
    visualize_map(grid)

    if args.export:
        out = Path(args.export)
        out.mkdir(parents=True, exist_ok=True)
        write_land_file(out / "land.txt", grid)
        write_travel_file(out / "travel.txt", grid_edges(grid))
        write_mission_file(out / "missions.txt", missions)
        print(f"Scenario exported to {out}")

    log = EventLog()
    runner = MissionRunner(graph_from_type_grid(grid), missions, sink=log)
    path = runner.run()

    for line in log.lines():
        print(line)
    print(f"Path length: {len(path)}")
    print("Stats:", runner.stats())

    if not args.no_plot:
        from dynpath.visualization import show_path_plot

        show_path_plot(runner)


if __name__ == "__main__":
    main()
