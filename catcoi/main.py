#!/usr/bin/env python3
"""
CLI‑обёртка: COI одной вязки или таблица пробных вязок.

Примеры:
    python -m catcoi.main --data_dir data --sire C12 --dam C40
    python -m catcoi.main --data_dir data --max_coi 6.25 --out matings.csv
"""
from __future__ import annotations
import argparse
import logging

from .model import LOGGER, evaluate_all_matings, evaluate_mating
from .risk import classify


def _parse(argv=None):
    p = argparse.ArgumentParser("cat test mating")
    p.add_argument("--data_dir", default="data",
                   help="директорий с cats.csv и pedigrees.csv")
    p.add_argument("--sire", default=None, help="id кота")
    p.add_argument("--dam", default=None, help="id кошки")
    p.add_argument("--max_coi", type=float, default=None,
                   help="оставить в таблице только пары с COI ≤ max_coi, %%")
    p.add_argument("--out", default=None,
                   help="CSV для результата (по умолчанию test_matings.csv для таблицы)")
    p.add_argument("--trace", action="store_true",
                   help="печатать каждую совпавшую пару путей")

    args = p.parse_args(argv)
    if (args.sire is None) != (args.dam is None):
        p.error("--sire and --dam must be given together")
    return args


def main(argv=None):
    args = _parse(argv)
    if args.trace:
        LOGGER.setLevel(logging.DEBUG)

    if args.sire is not None:
        result = evaluate_mating(args.data_dir, args.sire, args.dam)
        risk = classify(result.coi_percent)
        print(f"COI: {result.coi_percent:.2f}%  [{risk.level}] {risk.description}")
        for s in result.common_ancestors:
            print(f"  {s.name}: {100.0 * s.total_contribution:.3f}% ({len(s.matches)} paths)")
        if args.out:
            df = result.to_frame()
            df.to_csv(args.out, index=False)
            print(f"✅  Saved {len(df)} rows → {args.out}")
        return

    out = args.out or "test_matings.csv"
    df = evaluate_all_matings(args.data_dir, max_coi=args.max_coi)
    df.to_csv(out, index=False)
    print(f"✅  Saved {len(df)} rows → {out}")


if __name__ == "__main__":
    main()
