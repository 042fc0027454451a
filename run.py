"""CLI entrypoint: load grid token(s), check them, and report solvability."""

import argparse
import csv
import json
import os
from pathlib import Path
from typing import Any, Dict, List

from tqdm import tqdm

from solver import check_puzzle
from src.nonogram.loader import load_tokens
from src.nonogram.render import render_board
from src.utils.io import save_json
from src.utils.trace import get_tracer, reset_tracer

LIMIT_ENV = "NONOGRAM_MODEL_LIMIT"
INPUT_SUFFIXES = [".json", ".jsonl", ".parquet", ".csv", ".txt"]


def _default_limit() -> int:
    raw = os.environ.get(LIMIT_ENV, "0")
    try:
        return max(int(raw), 0)
    except ValueError:
        return 0


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Check whether 15x10 picture puzzles have a unique solution")
    parser.add_argument("input", help="Grid token, or path to a token file or directory of token files")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write a results CSV")
    parser.add_argument("--json", type=Path, default=None, help="Optional path to write a JSON report")
    parser.add_argument("--trace", type=Path, default=None, help="Optional path to write the solver trace CSV")
    parser.add_argument(
        "--limit",
        type=int,
        default=_default_limit(),
        help=f"Stop after this many models (0 = all; default from ${LIMIT_ENV})",
    )
    parser.add_argument("--board", action="store_true", help="Print each board with its clues")
    return parser.parse_args(argv)


def collect_records(source: str) -> List[Dict[str, Any]]:
    path = Path(source)
    if path.is_file():
        return load_tokens(str(path))
    if path.is_dir():
        records = []
        for file_path in sorted(path.iterdir()):
            if file_path.suffix in INPUT_SUFFIXES:
                records.extend(load_tokens(str(file_path)))
        return records
    return [{"id": "input", "token": source}]


def format_result(record_id: str, report: Dict[str, Any], steps: int) -> Dict[str, Any]:
    return {
        "id": record_id,
        "token": report["token"],
        "classification": report["classification"],
        "badge": report["badge"],
        "models": report["model_count"],
        "contested": report["contested"],
        "row_clues": report["row_clues"],
        "col_clues": report["col_clues"],
        "steps": steps,
    }


def write_results_csv(results, output_path: Path):
    with open(output_path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["id", "token", "classification", "models", "contested", "steps"])

        for r in results:
            writer.writerow([
                r["id"],
                r["token"],
                r["classification"],
                r["models"],
                json.dumps(r["contested"], separators=(",", ":")),
                r["steps"],
            ])


def main(argv=None):
    args = parse_args(argv)
    records = collect_records(args.input)
    results = []

    reset_tracer()
    iterator = records
    if len(records) > 1:
        iterator = tqdm(records, desc="Checking", unit="grid")

    for record in iterator:
        record_id = record.get("id", "unknown")
        tracer = get_tracer()
        before = tracer.summary()["num_assignments"]
        try:
            report = check_puzzle(record.get("token", ""), limit=args.limit)
            steps = tracer.summary()["num_assignments"] - before
            results.append(format_result(record_id, report, steps))
            if args.board:
                print(f"{record_id}:")
                print(render_board(report["grid"], report["clues"], report["aggregate"]))
                print()
        except Exception as e:
            print(f"ERROR: Failed to check {record_id}: {e}")
            results.append({
                "id": record_id,
                "token": record.get("token", ""),
                "classification": "error",
                "badge": "unsolvable",
                "models": -1,
                "contested": [],
                "row_clues": [],
                "col_clues": [],
                "steps": -1,
            })

    if args.trace:
        get_tracer().to_csv(args.trace)
    if args.json:
        save_json(args.json, results)
    if args.output:
        write_results_csv(results, args.output)
    elif not args.json and not args.board:
        for r in results:
            print(f"{r['id']}: {r['classification']} ({r['models']} models)")
    return results


if __name__ == "__main__":
    main()
