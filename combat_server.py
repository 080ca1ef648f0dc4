"""
Entry point for the pose combat game.

Usage examples:
    python combat_server.py                       # camera 0, TCP overlay on :5555
    python combat_server.py --overlay zmq         # publish overlay events over ZeroMQ
    python combat_server.py --camera 1 --model models/pose_landmarker_full.task
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
PY_DIR = ROOT / "python"
if str(PY_DIR) not in sys.path:
    sys.path.insert(0, str(PY_DIR))


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Pose combat launcher")
    parser.add_argument(
        "--config",
        default=str(PY_DIR / "config.json"),
        help="JSON config merged over the built-in defaults (hot-reloaded while running).",
    )
    parser.add_argument("--camera", type=int, default=None, help="Camera index for cv2.VideoCapture.")
    parser.add_argument("--model", default=None, help="Path to a mediapipe pose_landmarker .task file.")
    parser.add_argument(
        "--overlay",
        choices=("none", "tcp", "zmq"),
        default=None,
        help="Overlay export transport; defaults to overlay.transport from the config.",
    )
    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    if args.camera is not None:
        overrides.setdefault("camera", {})["index"] = args.camera
    if args.model is not None:
        overrides.setdefault("tracker", {})["model_path"] = args.model
    return overrides


def main(argv=None) -> None:
    args = parse_args(argv)
    from main_loop import main as run_main_loop

    run_main_loop(
        config_path=args.config,
        overrides=build_overrides(args),
        overlay_transport=args.overlay,
    )


if __name__ == "__main__":
    main()
