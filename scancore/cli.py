"""
Scan Capture CLI
================

Replays recorded camera captures and normalizes payloads from the
command line.

Usage:
    scancore replay capture.jsonl [--confirmations N] [--window-ms MS]
                                  [--cooldown-ms MS] [--json]
    scancore normalize PAYLOAD [PAYLOAD ...] [--json]
"""

from __future__ import annotations
from typing import List, Optional
import argparse
import json
import sys

from .config import parse_log_level
from .confirmation.engine import ConfirmationConfig
from .observability import configure_logging
from .symbology.normalizer import inspect
from .temporal.replay import CaptureFormatError, load_capture, replay_capture


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def _log_level(value: str) -> str:
    try:
        return parse_log_level(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def build_parser() -> argparse.ArgumentParser:
    defaults = ConfirmationConfig()
    parser = argparse.ArgumentParser(
        prog="scancore",
        description="Barcode normalization and scan confirmation tools"
    )
    parser.add_argument("--log-level", type=_log_level, default="WARNING",
                        help="Logging level (default WARNING)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser("replay", help="Replay a JSON-lines scan capture")
    replay.add_argument("capture", help="Path to the capture file")
    replay.add_argument("--confirmations", type=_positive_int,
                        default=defaults.confirmations_required)
    replay.add_argument("--window-ms", type=_positive_int,
                        default=defaults.window_duration_ms)
    replay.add_argument("--cooldown-ms", type=_positive_int,
                        default=defaults.cooldown_ms)
    replay.add_argument("--json", action="store_true", help="Emit the full result as JSON")

    normalize = subparsers.add_parser("normalize", help="Normalize payloads to canonical GTINs")
    normalize.add_argument("payloads", nargs="+")
    normalize.add_argument("--json", action="store_true", help="Emit results as JSON")

    return parser


def _run_replay(args: argparse.Namespace) -> int:
    config = ConfirmationConfig(
        confirmations_required=args.confirmations,
        window_duration_ms=args.window_ms,
        cooldown_ms=args.cooldown_ms,
    )
    try:
        reads = load_capture(args.capture)
    except (OSError, CaptureFormatError) as e:
        print(f"[!] Cannot load capture {args.capture}: {e}", file=sys.stderr)
        return 2

    result = replay_capture(reads, config)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"[*] Replayed {len(reads)} reads from {args.capture}")
    if not result.confirmed:
        print("No scans confirmed.")
    else:
        print("\n| Confirmed At (ms) | GTIN | Symbology | Payload |")
        print("| :--- | :--- | :--- | :--- |")
        for scan in result.confirmed:
            symbology = scan.symbology.value if scan.symbology else "-"
            print(f"| {scan.confirmed_at_ms} | `{scan.gtin.value}` | {symbology} | `{scan.payload}` |")

    metrics = result.metrics.to_dict()
    print(f"\nReads: {metrics['reads_total']}  Pending: {metrics['pending_total']}  "
          f"Confirmed: {metrics['confirmed_total']}  Ignored: {metrics['ignored_total']}")
    for reason, count in metrics['ignored_by_reason'].items():
        if count:
            print(f"  - {reason}: {count}")
    return 0


def _run_normalize(args: argparse.Namespace) -> int:
    results = [inspect(payload) for payload in args.payloads]
    if args.json:
        print(json.dumps([r.to_dict() for r in results], indent=2))
    else:
        for r in results:
            if r.is_success:
                print(f"{r.payload}\t{r.gtin.value}\t{r.symbology.value}")
            else:
                print(f"{r.payload}\t-\t{r.error.code.name}")
    return 0 if all(r.is_success for r in results) else 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    if args.command == "replay":
        return _run_replay(args)
    return _run_normalize(args)


if __name__ == "__main__":
    sys.exit(main())
