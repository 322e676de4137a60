import argparse
import logging
import sys

from spellcards.generator import main
from spellcards.store import read_identifiers


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Render spell cards into a printable PDF.")
    parser.add_argument("spells_json", help="Path to the JSON spell dump")
    parser.add_argument("spells", nargs="*", help="Spell identifiers (id or name) in print order; repeat a spell to get several copies")
    parser.add_argument("-o", "--output", help="Path to the output PDF file (default: output/<spells file>.pdf)", required=False)
    parser.add_argument("--ids", help="File with one spell identifier per line, appended after positional spells", required=False)
    parser.add_argument("--workers", type=int, default=1, help="Number of threads used to lay out cards. Page order is unaffected.")
    parser.add_argument("--columns", type=int, default=3, help="Card slots per page row (default: 3)")
    parser.add_argument("--rows", type=int, default=3, help="Card slot rows per page (default: 3)")
    parser.add_argument("--no-unicode-fonts", action="store_true", help="Do not look for TrueType fonts; use built-in Helvetica")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log per-card details")
    args = parser.parse_args()

    identifiers = list(args.spells)
    if args.ids:
        identifiers.extend(read_identifiers(args.ids))
    if not identifiers:
        parser.error("no spells requested; pass identifiers or --ids FILE")
    if args.columns < 1 or args.rows < 2:
        parser.error("--columns must be at least 1 and --rows at least 2 (double cards span two rows)")

    # configure basic logging to console so users are kept up-to-date
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")
    try:
        main(
            args.spells_json,
            identifiers,
            args.output,
            workers=args.workers,
            columns=args.columns,
            rows=args.rows,
            unicode_fonts=not args.no_unicode_fonts,
        )
    except ValueError as exc:
        # unreadable spell dump or a grid that does not fit the page
        logging.getLogger(__name__).error("%s", exc)
        sys.exit(2)
