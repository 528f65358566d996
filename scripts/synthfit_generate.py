#!/usr/bin/env python3
"""CLI: SynthFit deterministic demo fixture generator.

Examples:
  python synthfit_generate.py --out ./out --reference-date 2024-06-15 --format json
  python synthfit_generate.py --out ./out --config ./config.json --with-streams 5
"""
from __future__ import annotations
import argparse
from synthfit_gen.config import FixtureConfig
from synthfit_gen.pipeline import generate_fixtures

def parse_args(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--out", required=True, help="Output directory")
    p.add_argument("--config", default=None, help="Optional config JSON (overrides defaults)")
    p.add_argument("--reference-date", type=str, default=None, help="Newest day of the dataset (default: today)")
    p.add_argument("--n-days", type=int, default=None)
    p.add_argument("--format", type=str, default=None, choices=["csv", "parquet", "json", "both"])
    p.add_argument("--no-checks", action="store_true", help="Skip sanity checks")
    p.add_argument("--with-streams", type=int, default=0, metavar="N",
                   help="Also write stream payloads for the N newest activities")
    return p.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    cfg = FixtureConfig()
    if args.config:
        cfg = FixtureConfig.from_json(args.config)

    # apply CLI overrides
    for key, val in {
        "n_days": args.n_days,
        "out_format": args.format,
    }.items():
        if val is not None:
            setattr(cfg, key, val)

    res = generate_fixtures(cfg, out_dir=args.out, reference_date=args.reference_date,
                            run_checks=not args.no_checks, with_streams=args.with_streams)
    print("✅ Done.")
    print(f"metadata.json: {res['metadata_path']}")
    for k, v in res["outputs"].items():
        print(f"{k}: {v}")
    if "ok" in res and not res["ok"]:
        print(f"⚠️  Sanity checks failed, see {res['sanity_report_path']}")

if __name__ == "__main__":
    main()
