#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import json
import os
import platform
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

# Ensure repo root (which contains `tablut/`) is importable when running directly
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from tablut.engine.board import Board
from tablut.engine.game import Game
from tablut.engine.move import parse_move
from tablut.search.service import DEFAULT_DEPTH, SearchResult, SearchService


@dataclass
class BenchItem:
    id: str
    name: str
    position: Optional[str] = None
    moves: Optional[List[str]] = None
    depth: Optional[int] = None


# Built-in suite used when no positions file is given
DEFAULT_ITEMS = [
    BenchItem(id="start", name="Initial position"),
    BenchItem(id="opening", name="After two quiet moves", moves=["h5-6", "g5-2"]),
    BenchItem(
        id="open-file",
        name="Defenders stepping off the throne files",
        moves=["f1-4", "e4-d", "i6-h", "e7-d"],
    ),
]


def load_positions(path: str) -> List[BenchItem]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    items: List[BenchItem] = []
    for obj in data.get("positions", []):
        items.append(
            BenchItem(
                id=str(obj.get("id", obj.get("name", "pos"))),
                name=str(obj.get("name", "Unnamed")),
                position=obj.get("position"),
                moves=[str(m) for m in obj.get("moves", [])] or None,
                depth=(int(obj["depth"]) if obj.get("depth") is not None else None),
            )
        )
    return items


def _game_for(item: BenchItem) -> Game:
    try:
        game = Game(board=Board.from_encoded(item.position)) if item.position else Game.new()
        for text in item.moves or []:
            game.apply_move(parse_move(text))
    except ValueError as e:
        raise ValueError(f"Invalid position for {item.id}: {e}")
    return game


def bench_position(
    svc: SearchService, item: BenchItem, *, depth: int, iterations: int, pruning: bool
) -> Dict[str, Any]:
    eff_depth = item.depth if item.depth is not None else depth
    game = _game_for(item)

    total_time = 0
    total_nodes = 0
    last: Optional[SearchResult] = None
    for _ in range(max(1, iterations)):
        res = svc.search(game, depth=eff_depth, enable_pruning=pruning)
        total_time += max(0, res.time_ms)
        total_nodes += max(0, res.nodes)
        last = res

    assert last is not None

    avg_time = int(total_time / max(1, iterations))
    avg_nodes = int(total_nodes / max(1, iterations))
    nps = int(avg_nodes * 1000 / max(1, avg_time)) if avg_time > 0 else 0
    return {
        "id": item.id,
        "name": item.name,
        "position": game.encoded(),
        "depth": last.depth,
        "best_move": (last.best_move.to_text() if last.best_move else None),
        "score": last.score,
        "time_ms": avg_time,
        "nodes": avg_nodes,
        "nps": nps,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Run search benchmarks over a positions suite")
    parser.add_argument("--positions", default=None, help="Path to positions.json")
    parser.add_argument(
        "--depth", type=int, default=DEFAULT_DEPTH, help="Search depth per position"
    )
    parser.add_argument(
        "--no-pruning", action="store_true", help="Disable alpha-beta cut-offs (plain minimax)"
    )
    parser.add_argument(
        "--iterations", type=int, default=1, help="Repeat runs per position and average"
    )
    parser.add_argument("--out", type=str, default=None, help="Write JSON results to file path")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument(
        "--progress", action="store_true", help="Print per-position progress to stderr"
    )
    args = parser.parse_args()

    items = load_positions(args.positions) if args.positions else DEFAULT_ITEMS
    if not items:
        raise SystemExit("No positions found in positions file")

    svc = SearchService()
    results: List[Dict[str, Any]] = []
    t0 = time.perf_counter()
    for idx, it in enumerate(items, start=1):
        if args.progress:
            sys.stderr.write(f"[{idx}/{len(items)}] {it.id}: running...\n")
            sys.stderr.flush()
        res = bench_position(
            svc,
            it,
            depth=args.depth,
            iterations=max(1, args.iterations),
            pruning=not args.no_pruning,
        )
        results.append(res)
        if args.progress:
            sys.stderr.write(
                f"    depth={res['depth']} time={res['time_ms']}ms nodes={res['nodes']} nps={res['nps']} best={res['best_move']}\n"
            )
            sys.stderr.flush()

    dt_ms = int((time.perf_counter() - t0) * 1000)
    total_nodes = sum(r["nodes"] for r in results)
    payload = {
        "meta": {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "python": sys.version.split()[0],
            "platform": platform.platform(),
            "config": {
                "positions_file": args.positions,
                "iterations": max(1, args.iterations),
                "depth": args.depth,
                "pruning": not args.no_pruning,
            },
        },
        "results": results,
        "summary": {
            "positions": len(results),
            "total_time_ms": dt_ms,
            "total_nodes": total_nodes,
            "overall_nps": int(total_nodes * 1000 / max(1, dt_ms)) if dt_ms > 0 else 0,
        },
    }

    if args.out:
        out_dir = os.path.dirname(args.out)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2 if args.pretty else None)
        print(args.out)
    else:
        print(json.dumps(payload, indent=2 if args.pretty else None))


if __name__ == "__main__":
    main()
