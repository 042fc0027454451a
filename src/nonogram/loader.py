import json
import os
from typing import Any, Dict, List

import pandas as pd

_TOKEN_KEYS = ("token", "grid", "hash", "puzzle")


def load_tokens(file_path: str) -> List[Dict[str, Any]]:
    """
    Reads grid tokens from a file. Handles .parquet, .csv, .json, .jsonl and
    plain text (one token per line). Returns records with at least `id` and `token`.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    stem = os.path.splitext(os.path.basename(file_path))[0]

    def _extract_token(record: Dict[str, Any]) -> str:
        for key in _TOKEN_KEYS:
            value = record.get(key)
            if isinstance(value, str) and value.strip():
                token = value.strip()
                # URL fragments are stored with their leading '#'.
                return token[1:] if token.startswith("#") else token
        return ""

    def _normalize_record(record: Dict[str, Any], idx: int) -> Dict[str, Any]:
        record["token"] = _extract_token(record)
        if record.get("id") is None or (isinstance(record.get("id"), float) and pd.isna(record["id"])):
            record["id"] = f"{stem}-{idx}"
        else:
            record["id"] = str(record["id"])
        return record

    def _from_lines(lines) -> List[Dict[str, Any]]:
        data = []
        for line in lines:
            if not line.strip():
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                obj = line.strip()
            if not isinstance(obj, dict):
                # Bare '1010...' lines parse as JSON numbers; keep the raw text.
                obj = {"token": obj if isinstance(obj, str) else line.strip()}
            data.append(_normalize_record(obj, len(data)))
        return data

    # Case 1: tabular files
    if file_path.endswith((".parquet", ".csv")):
        if file_path.endswith(".parquet"):
            df = pd.read_parquet(file_path)
        else:
            # Tokens are digit strings; keep leading zeros.
            df = pd.read_csv(file_path, dtype=str, keep_default_na=False)
        records = df.to_dict(orient="records")
        return [_normalize_record(r, i) for i, r in enumerate(records)]

    # Case 2: JSON file (array or object)
    if file_path.endswith(".json"):
        with open(file_path, "r", encoding="utf-8") as f:
            raw = f.read()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            # Some sources use ".json" but actually store JSONL; fall back to line-delimited parsing.
            return _from_lines(raw.splitlines())
        if isinstance(payload, dict):
            payload = [payload]
        if isinstance(payload, list):
            return _from_lines(json.dumps(p) for p in payload if isinstance(p, (dict, str)))
        return []

    # Case 3: JSONL or one token per line
    with open(file_path, "r", encoding="utf-8") as f:
        return _from_lines(f)
