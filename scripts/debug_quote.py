#!/usr/bin/env python
"""
Print a quote and its resolution trace.

Usage:
    python scripts/debug_quote.py level2 24 --promo welcome10
"""
import argparse
import sys
from pathlib import Path

# Add src to path
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))

from enrollment_pricing.engine import PricingEngine, QuoteValidationError
from enrollment_pricing.engine.formatting import format_cents


def main():
    parser = argparse.ArgumentParser(description="Debug a package quote")
    parser.add_argument('level')
    parser.add_argument('sessions', type=int)
    parser.add_argument('--promo', default=None)
    parser.add_argument('--currency', default=None)
    args = parser.parse_args()

    engine = PricingEngine()

    print("Loaded Tables:")
    for level in engine.tables.levels.values():
        print(f"  {level.level_id}: {level.name} = {level.base_cents}")
    for terms in engine.tables.packages.values():
        print(f"  {terms.sessions} sessions: {terms.discount_pct}% off, {terms.expiry_days} days")
    print(f"  Promo codes: {', '.join(engine.tables.promo_codes) or '(none)'}")
    print()

    try:
        result = engine.quote(args.level, args.sessions, args.promo, args.currency)
    except QuoteValidationError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    print("Trace:")
    print(result.get_trace_text())
    print()
    for warning in result.warnings:
        print(f"WARNING: {warning}")
    print(f"Total: {format_cents(result.total_cents, result.currency)} ({result.total_cents} {result.currency})")
    print(f"Expires after: {result.expiry_days} days")
    print(result.to_api_dict())


if __name__ == "__main__":
    main()
