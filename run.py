"""Burrow CLI entry point.

Generates BSP dungeon layouts and prints them as ASCII, writes them to a file,
shows the partition tree outline, serves the read-only JSON API, or opens the
interactive terminal viewer. Accepts configuration via flags and BURROW_*
environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from burrow import __version__
from burrow.dungeon import SPLIT_DIRECTIONS, Dungeon, DungeonConfig, TreeError
from burrow.dungeon.geometry import CENTER_MODES
from burrow.logging_utils import get_logger, route_to_stderr, set_level

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

log = get_logger("burrow.cli")


def _add_dungeon_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--seed", type=int, default=None, help="RNG seed (default: env BURROW_SEED or random)")
    p.add_argument("--width", type=int, default=None, help="Map width (default: 80)")
    p.add_argument("--height", type=int, default=None, help="Map height (default: 40)")
    p.add_argument("--splits", type=int, default=None, help="Number of split rounds (default: 4)")
    p.add_argument(
        "--homogeneity",
        type=float,
        default=None,
        help="0..1; higher values give more evenly sized regions (default: 0.5)",
    )
    p.add_argument("--direction", choices=SPLIT_DIRECTIONS, default=None, help="Split direction policy")
    p.add_argument("--center", choices=CENTER_MODES, default=None, help="Corridor endpoint formula")


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Burrow BSP dungeon generator

    Recursively partitions a rectangle, carves a room inside each leaf region
    and links sibling rooms with corridors. If both CLI flags and environment
    variables are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          BURROW_WIDTH, BURROW_HEIGHT, BURROW_SPLITS, BURROW_HOMOGENEITY,
          BURROW_SPLIT_DIRECTION, BURROW_INSETS ("2,2,2,2"), BURROW_CENTER_MODE,
          BURROW_SEED      Dungeon defaults
          BURROW_LOG_LEVEL debug|info|warn|error (default: warn)
          BURROW_LOG_STDERR 1 to send every log level to stderr
                           (always on for `generate` and `tree`)
          HOST, PORT       Bind address for `serve` (default: 127.0.0.1:5000)

        Examples:
          # Print a dungeon to the terminal
          python run.py generate --seed 7

          # Write the layout to dung.out without corridors
          python run.py generate --out dung.out --no-paths

          # Show the partition tree
          python run.py tree --splits 3

          # Serve the JSON API
          python run.py serve --port 8080

          # Interactive viewer (q quit, r regenerate, t tree, p corridors)
          python run.py view
        """
    )

    parser = argparse.ArgumentParser(
        prog="burrow",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--env-file", dest="env_file", help="Path to a .env file to load before processing flags")
    parser.add_argument("--verbose", action="store_true", help="Emit debug-level generation events")
    parser.add_argument("--version", action="version", version=f"Burrow Dungeon Generator {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate a dungeon and print or save the ASCII map",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_dungeon_args(gen_parser)
    gen_parser.add_argument("--out", default=None, help="Write the map to this file instead of stdout")
    gen_parser.add_argument("--no-paths", dest="no_paths", action="store_true", help="Omit corridors")
    gen_parser.add_argument("--metrics", action="store_true", help="Print generation metrics after the map")

    tree_parser = subparsers.add_parser("tree", help="Print the partition tree outline")
    _add_dungeon_args(tree_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the read-only JSON API")
    serve_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to bind (default: env PORT or 5000)")
    serve_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    view_parser = subparsers.add_parser("view", help="Open the interactive terminal viewer")
    _add_dungeon_args(view_parser)

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DungeonConfig:
    return DungeonConfig.from_env(
        seed=getattr(args, "seed", None),
        width=getattr(args, "width", None),
        height=getattr(args, "height", None),
        splits=getattr(args, "splits", None),
        homogeneity=getattr(args, "homogeneity", None),
        split_direction=getattr(args, "direction", None),
        center_mode=getattr(args, "center", None),
    )


def _banner(dungeon: Dungeon) -> str:
    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    m = dungeon.metrics
    return "  ".join(
        [
            f"{label('seed:')} {value(dungeon.seed)}",
            f"{label('size:')} {value(f'{dungeon.width}x{dungeon.height}')}",
            f"{label('leaves:')} {value(m.get('leaves', 0))}",
            f"{label('rooms:')} {value(m.get('rooms', 0))}",
            f"{label('corridors:')} {value(m.get('paths', 0))}",
        ]
    )


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()
    if args.verbose:
        set_level("debug")

    mode = (args.command or "generate").lower()
    if mode == "serve":
        from burrow.server import start_server

        host = args.host or os.getenv("HOST", "127.0.0.1")
        port = int(args.port or os.getenv("PORT", "5000"))
        log.info(event="startup", mode=mode, host=host, port=port)
        start_server(host=host, port=port, debug=args.debug)
        return 0

    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if mode in ("generate", "tree"):
        # Keep stdout clean for the map or outline, e.g. `generate --verbose > map.txt`
        route_to_stderr()

    if mode == "view":
        # Lazy import so the plain CLI paths don't pay for Textual startup
        from burrow.viewer import run_viewer

        run_viewer(config)
        return 0

    try:
        dungeon = Dungeon(config)
    except TreeError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    if mode == "tree":
        print("\n".join(dungeon.outline()))
        return 0

    rows = dungeon.ascii(show_paths=not getattr(args, "no_paths", False))
    if getattr(args, "out", None):
        from burrow.dungeon import write_ascii

        path = write_ascii(dungeon.tree, args.out, show_paths=not getattr(args, "no_paths", False))
        print(f"Wrote {len(rows)} rows to {path}")
    else:
        print("\n".join(rows))
    print(_banner(dungeon))
    if getattr(args, "metrics", False):
        for key, val in dungeon.metrics.items():
            print(f"  {key}: {val}")
    return 0


def _console_main() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(_console_main())
