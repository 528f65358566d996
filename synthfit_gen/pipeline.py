from __future__ import annotations
import json, hashlib, platform, datetime, sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import FixtureConfig
from .io import write_outputs, write_streams
from .repository import FixtureRepository
from .sanity import run_sanity_checks
from .utils import DateLike


def _sha256_file(path: Path) -> str:
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024*1024), b""):
            h.update(chunk)
    return h.hexdigest()


def generate_fixtures(cfg: FixtureConfig, out_dir: str | Path, reference_date: Optional[DateLike] = None,
                      run_checks: bool = True, with_streams: int = 0) -> dict:
    """Build the fixture set and write it to ``out_dir``.

    ``with_streams`` writes stream payloads for that many of the newest activities.
    """
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    repo = FixtureRepository(reference_date, cfg)
    activities = repo.get_activities()
    wellness = repo.get_wellness()

    written = write_outputs(activities, wellness, out_path, cfg)
    if with_streams > 0:
        streams = {a["id"]: repo.get_activity_streams(a["id"]) for a in activities[:with_streams]}
        written.update(write_streams(streams, out_path))

    cfg_path = out_path / "config.json"
    cfg.to_json(str(cfg_path))

    meta = {
        "generated_at_utc": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds"),
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "reference_date": repo.reference_date.isoformat(),
        "config": cfg.to_dict(),
        "counts": {
            "n_activities": len(activities),
            "n_wellness_rows": len(wellness),
            "n_activity_types": len({a["type"] for a in activities}),
        },
        "files": {},
    }

    for name, path in written.items():
        meta["files"][name] = {
            "path": str(path),
            "sha256": _sha256_file(Path(path)),
        }

    meta_path = out_path / "metadata.json"
    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2)

    result = {"metadata_path": str(meta_path), "config_path": str(cfg_path), "outputs": written}
    if run_checks:
        report = run_sanity_checks(repo)
        report_path = out_path / "sanity_report.json"
        with open(report_path, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2)
        result["sanity_report_path"] = str(report_path)
        result["ok"] = report["summary"]["ok"]
        if not report["summary"]["ok"]:
            logger.warning("Sanity checks failed: {}", [c["name"] for c in report["checks"] if not c["ok"]])

    logger.info("Wrote {} files to {}", len(written), out_path)
    return result
