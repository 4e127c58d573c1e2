"""Simple CLI for the Palindrome Tip Calculator.

Usage examples (PowerShell):
  python cli.py tip --subtotal 35.23 --total 41.12 --percent 20
  python cli.py batch --input bills.csv --output palindrome_tips.xlsx
"""
from argparse import ArgumentParser
import logging
import sys
from palindrome_tip.batch import calculate_batch
from palindrome_tip.core import DEFAULT_TIP_PERCENT
from palindrome_tip.formatting import process_inputs


def main(argv=None):
    parser = ArgumentParser(prog="palindrome-tip")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    sub = parser.add_subparsers(dest="cmd")

    p_tip = sub.add_parser("tip", help="Calculate the palindrome tip and total")
    p_tip.add_argument("--subtotal", required=True, help="Subtotal before tax (e.g., 35.23)")
    p_tip.add_argument("--total", required=True, help="Total including tax (e.g., 41.12)")
    p_tip.add_argument("--percent", default=str(DEFAULT_TIP_PERCENT), help="Tip percent (default 20)")

    p_batch = sub.add_parser("batch", help="Calculate palindrome tips for a CSV/Excel file of bills")
    p_batch.add_argument("--input", required=True, help="Input .csv, .xlsx or .xls file")
    p_batch.add_argument("--output", required=True, help="Output .xlsx file")
    p_batch.add_argument("--subtotal-col", help="Subtotal column name (auto-detected if omitted)")
    p_batch.add_argument("--total-col", help="Total column name (auto-detected if omitted)")
    p_batch.add_argument("--tip-col", help="Tip %% column name (auto-detected if omitted)")
    p_batch.add_argument("--percent", default=str(DEFAULT_TIP_PERCENT), help="Tip percent for rows without one")

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO)

    if args.cmd == "tip":
        validation, text = process_inputs(args.subtotal, args.total, args.percent)
        if not validation.ok:
            print(validation.message, file=sys.stderr)
            return 2
        print(text)
    elif args.cmd == "batch":
        results_df = calculate_batch(
            args.input,
            args.output,
            args.subtotal_col,
            args.total_col,
            args.tip_col,
            default_tip_percent=args.percent,
        )
        failed = int((results_df["Error"] != "").sum())
        print(f"Rows: {len(results_df)}")
        print(f"Failed validation: {failed}")
        print(f"Written: {args.output}")
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
