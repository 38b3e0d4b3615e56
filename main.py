"""
Life Simulator — CLI Entry Point

Usage:
    python main.py --width 40 --height 20 --pattern glider --frames 50
    python main.py --config config.json --set loop.fps=0
    python main.py --ui
"""

import argparse
import json
import sys
import time
from pathlib import Path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Life Simulator — Conway's Game of Life on a toroidal grid",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --ui                                   Launch Streamlit UI
  python main.py --pattern glider --width 20 --height 20 --frames 40
  python main.py --pattern random --seed 7 --fps 0 --frames 200
  python main.py --config config.json --set universe.width=128
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to JSON config file (default: built-in defaults)",
    )
    parser.add_argument(
        "--ui",
        action="store_true",
        help="Launch Streamlit web UI (ignores all other options)",
    )
    parser.add_argument("--width", type=int, default=None, help="Override grid width")
    parser.add_argument("--height", type=int, default=None, help="Override grid height")
    parser.add_argument(
        "--pattern",
        type=str,
        default=None,
        help="Seed pattern: modulo, empty, random, or a named pattern (glider, blinker, ...)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Override random seed")
    parser.add_argument(
        "--frames",
        type=int,
        default=None,
        help="Number of frames to run (0 = until interrupted, or until static "
             "with --set loop.stop_when_static=true)",
    )
    parser.add_argument("--fps", type=float, default=None, help="Frames per second (0 = unthrottled)")
    parser.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override any config value by dotted key, e.g. render.alive_glyph=#",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print frames, only the final summary",
    )

    return parser.parse_args(argv)


def launch_ui() -> None:
    """Launch the Streamlit web UI."""
    import subprocess
    ui_path = Path(__file__).parent / "lifegrid" / "ui" / "app.py"
    if not ui_path.exists():
        print(f"Error: UI app not found at {ui_path}")
        sys.exit(1)
    subprocess.run(
        [
            sys.executable, "-m", "streamlit", "run", str(ui_path),
            "--server.port=8501",
            "--server.headless=true",
            "--browser.gatherUsageStats=false",
        ],
        check=True,
    )


def _parse_override(raw: str) -> tuple[str, object]:
    """Split KEY=VALUE; VALUE is decoded as JSON when possible, else kept as text."""
    if "=" not in raw:
        raise ValueError(f"Override '{raw}' must look like KEY=VALUE")
    key, value = raw.split("=", 1)
    try:
        return key.strip(), json.loads(value)
    except json.JSONDecodeError:
        return key.strip(), value


def build_config(args: argparse.Namespace):
    """Load the config file (or defaults) and apply command-line overrides."""
    from lifegrid.core.config import apply_param_override, get_default_config, load_config

    config = load_config(args.config) if args.config else get_default_config()

    for key, value in (
        ("universe.width", args.width),
        ("universe.height", args.height),
        ("universe.pattern", args.pattern),
        ("universe.seed", args.seed),
        ("loop.max_frames", args.frames),
        ("loop.fps", args.fps),
    ):
        if value is not None:
            apply_param_override(config, key, value)

    for raw in args.set:
        key, value = _parse_override(raw)
        apply_param_override(config, key, value)

    errors = config.validate()
    if errors:
        raise ValueError("Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors))
    return config


def run(config, quiet: bool = False) -> None:
    """Drive a universe through the render loop, printing each frame."""
    from lifegrid.core.config import create_universe
    from lifegrid.host.loop import RenderLoop

    universe = create_universe(config)

    print(f"[Life Simulator]")
    print(f"  Grid: {universe.width}x{universe.height}")
    print(f"  Pattern: {config.universe.pattern}")
    print(f"  Seed: {config.universe.seed}")
    print(f"  Frames: {config.loop.max_frames or 'unbounded'}")
    print(f"  FPS: {config.loop.fps or 'unthrottled'}")
    print()

    def on_frame(text, stats, loop) -> None:
        if quiet:
            return
        print(text)
        print(f"  Gen {stats.generation:5d} | Alive: {stats.alive_count:6d} "
              f"| +{stats.births} -{stats.deaths}")
        print()

    loop = RenderLoop(
        universe,
        fps=config.loop.fps,
        on_frame=on_frame,
        dead_glyph=config.render.dead_glyph,
        alive_glyph=config.render.alive_glyph,
        stop_when_static=config.loop.stop_when_static,
    )

    start_time = time.time()
    try:
        result = loop.run(max_frames=config.loop.max_frames)
    except KeyboardInterrupt:
        print()
        print("  Interrupted.")
        return
    elapsed = time.time() - start_time

    print(f"[Result]")
    print(f"  Frames: {result.frames}")
    print(f"  Final generation: {result.final_generation}")
    print(f"  Final alive: {result.final_alive_count}")
    print(f"  Extinct: {result.extinct}")
    print(f"  Static: {result.static}")
    print(f"  Elapsed: {elapsed:.1f}s")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    if args.ui:
        launch_ui()
        return

    try:
        config = build_config(args)
    except (FileNotFoundError, KeyError, ValueError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    run(config, quiet=args.quiet)


if __name__ == "__main__":
    main()
