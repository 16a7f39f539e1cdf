from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from stock_analytics.config import BATCH_MAX_WORKERS
from stock_analytics.engine import analyze_batch, analyze_payload
from stock_analytics.models import ValidationError
from stock_analytics.series import history_records, normalize_candles

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the technical and fundamental analysis on snapshot JSON")
    parser.add_argument("snapshot", help="snapshot JSON file, or a {symbol: snapshot} file with --batch")
    parser.add_argument("--batch", action="store_true", help="treat the file as a mapping of symbol to snapshot")
    parser.add_argument("--workers", type=int, default=BATCH_MAX_WORKERS)
    parser.add_argument("--history", action="store_true", help="include chart-ready bar history")
    parser.add_argument("--indent", type=int, default=2)
    parser.add_argument("--out-csv", default=None, help="write the batch table to this CSV path")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    snapshot = json.loads(Path(args.snapshot).read_text(encoding="utf-8"))

    if args.batch:
        df = analyze_batch(snapshot, max_workers=args.workers)
        if args.out_csv:
            Path(args.out_csv).parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(args.out_csv, index=False)
            logger.info("wrote %d rows to %s", len(df), args.out_csv)
        print(df.to_json(orient="records", indent=args.indent))
        return 0

    try:
        payload = analyze_payload(snapshot)
        if args.history:
            payload["history"] = history_records(normalize_candles(snapshot.get("candles") or []))
    except ValidationError as exc:
        print(f"invalid snapshot: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(payload, ensure_ascii=False, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
