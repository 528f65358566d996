from __future__ import annotations
import json
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from .config import FixtureConfig


def records_to_frame(records: List[Dict[str, Any]]) -> pd.DataFrame:
    """Flat table of API records; nested lists/dicts become JSON strings."""
    df = pd.DataFrame.from_records(records)
    for col in df.columns:
        if df[col].map(lambda v: isinstance(v, (list, dict))).any():
            df[col] = df[col].map(lambda v: json.dumps(v) if isinstance(v, (list, dict)) else v)
    return df


def _write_csv(df: pd.DataFrame, path: Path):
    df.to_csv(path, index=False)


def _write_parquet(df: pd.DataFrame, path: Path):
    try:
        df.to_parquet(path, index=False)
    except Exception as e:
        raise RuntimeError(
            "Parquet write failed. Install pyarrow (pip install synthfit-gen[parquet]) or use --format csv."
        ) from e


def _write_json(records: List[Dict[str, Any]], path: Path):
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)


def write_outputs(activities: List[Dict[str, Any]], wellness: List[Dict[str, Any]],
                  out_dir: Path, cfg: FixtureConfig) -> dict:
    written = {}

    fmt = cfg.out_format
    if fmt in ("csv", "both"):
        ap = out_dir / "activities.csv"
        wp = out_dir / "wellness.csv"
        _write_csv(records_to_frame(activities), ap); _write_csv(records_to_frame(wellness), wp)
        written["activities_csv"] = str(ap)
        written["wellness_csv"] = str(wp)

    if fmt in ("parquet", "both"):
        ap = out_dir / "activities.parquet"
        wp = out_dir / "wellness.parquet"
        _write_parquet(records_to_frame(activities), ap); _write_parquet(records_to_frame(wellness), wp)
        written["activities_parquet"] = str(ap)
        written["wellness_parquet"] = str(wp)

    if fmt == "json":
        ap = out_dir / "activities.json"
        wp = out_dir / "wellness.json"
        _write_json(activities, ap); _write_json(wellness, wp)
        written["activities_json"] = str(ap)
        written["wellness_json"] = str(wp)

    return written


def write_streams(streams: Dict[str, Dict[str, list]], out_dir: Path) -> dict:
    """One ``streams/<activity id>.json`` per entry."""
    stream_dir = out_dir / "streams"
    stream_dir.mkdir(parents=True, exist_ok=True)
    written = {}
    for aid, payload in streams.items():
        path = stream_dir / f"{aid}.json"
        _write_json(payload, path)
        written[f"streams_{aid}"] = str(path)
    return written
