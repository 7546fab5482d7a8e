from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pricetracker import build_default_dispatcher
from pricetracker.adapters import PriceEntrySQLiteRepository, export_entries_csv, parse_entries_csv
from pricetracker.adapters.csv_io import normalize_category
from pricetracker.core.models import UNITS, PriceEntry
from pricetracker.parsers.jd import parse_jd_spec_html
from pricetracker.units import ceil_to_two, unit_price

LOGGER = logging.getLogger("price_tracker")

DEFAULT_DB = "price_tracker.db"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse product listings and track their prices")
    parser.add_argument("--log-level", default="WARNING", help="Log level")
    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Parse pasted listing text or a JD JSON feed")
    parse_cmd.add_argument("file", nargs="?", default="-", help="Input file, '-' for stdin")
    parse_cmd.add_argument("--comparison-unit", choices=UNITS, default=None, help="Unit to compare prices in")
    parse_cmd.add_argument("--save", action="store_true", help="Store the parsed product as a price entry")
    parse_cmd.add_argument("--category", default=None, help="Entry category, required with --save")
    parse_cmd.add_argument("--db", default=DEFAULT_DB, help="SQLite database path")

    export_cmd = commands.add_parser("export", help="Export stored entries as CSV")
    export_cmd.add_argument("--db", default=DEFAULT_DB, help="SQLite database path")
    export_cmd.add_argument("-o", "--output", default="", help="Output CSV file, stdout when omitted")

    import_cmd = commands.add_parser("import", help="Import entries from a CSV file")
    import_cmd.add_argument("file", help="CSV file to import")
    import_cmd.add_argument("--db", default=DEFAULT_DB, help="SQLite database path")

    spec_cmd = commands.add_parser("jd-spec", help="Extract the specification sheet from a saved JD page")
    spec_cmd.add_argument("file", nargs="?", default="-", help="HTML file, '-' for stdin")

    unit_cmd = commands.add_parser("unit-price", help="Price per comparison unit, rounded up")
    unit_cmd.add_argument("price", type=float)
    unit_cmd.add_argument("quantity", type=float)
    unit_cmd.add_argument("unit", choices=UNITS)
    unit_cmd.add_argument("comparison_unit", choices=UNITS)
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _run_parse(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    category = None
    if args.save:
        category = normalize_category((args.category or "").strip())
        if category is None:
            parser.error("--save needs a valid --category")

    result = build_default_dispatcher().parse(_read_input(args.file))
    payload = result.to_dict()

    if result.success and result.data is not None:
        product = result.data
        comparison_unit = args.comparison_unit or product.comparison_unit
        per_unit = None
        if product.price is not None and product.quantity is not None and product.unit and comparison_unit:
            per_unit = unit_price(product.price, product.quantity, product.unit, comparison_unit)
        payload["unit_price"] = ceil_to_two(per_unit) if per_unit is not None else None
        payload["comparison_unit"] = comparison_unit

        if args.save:
            entry = PriceEntrySQLiteRepository(args.db).add(PriceEntry.from_parsed(product, category=category))
            payload["entry_id"] = entry.id

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if result.success else 1


def _run_export(args: argparse.Namespace) -> int:
    entries = PriceEntrySQLiteRepository(args.db).list_entries()
    content = export_entries_csv(entries)
    if args.output:
        Path(args.output).write_text(content, encoding="utf-8")
        LOGGER.info("Wrote %d entries to %s", len(entries), args.output)
    else:
        sys.stdout.write(content)
    return 0


def _run_import(args: argparse.Namespace) -> int:
    result = parse_entries_csv(Path(args.file).read_text(encoding="utf-8-sig"))
    stored = PriceEntrySQLiteRepository(args.db).add_many(result.entries)
    for error in result.errors:
        LOGGER.warning("%s", error.error)

    print(f"Imported {len(stored)} entries, rejected {len(result.errors)} rows")
    return 1 if result.errors else 0


def _run_jd_spec(args: argparse.Namespace) -> int:
    sheet = parse_jd_spec_html(_read_input(args.file))
    payload = {
        "title": sheet.title,
        "brand": sheet.brand,
        "source_address": sheet.source_address,
        "specification": sheet.specification_text(),
    }
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0 if sheet.attributes else 1


def _run_unit_price(args: argparse.Namespace) -> int:
    value = unit_price(args.price, args.quantity, args.unit, args.comparison_unit)
    if value is None:
        print(f"Cannot compare {args.unit} with {args.comparison_unit}", file=sys.stderr)
        return 1

    print(f"{ceil_to_two(value):.2f}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "parse":
        return _run_parse(args, parser)
    if args.command == "export":
        return _run_export(args)
    if args.command == "import":
        return _run_import(args)
    if args.command == "jd-spec":
        return _run_jd_spec(args)
    return _run_unit_price(args)


if __name__ == "__main__":
    raise SystemExit(main())
