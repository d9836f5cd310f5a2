#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `tablut/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from tablut.engine.board import Board
from tablut.engine.perft import perft


def main() -> None:
    parser = argparse.ArgumentParser(description="Count move-tree leaves for a Tablut position")
    parser.add_argument(
        "--position",
        type=str,
        default=None,
        help="Encoded board (turn + 81 squares); default: initial position",
    )
    parser.add_argument("--depth", type=int, default=2, help="Perft depth (default: 2)")
    args = parser.parse_args()

    board = Board.from_encoded(args.position) if args.position else Board.initial()
    start = time.perf_counter()
    nodes = perft(board, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
