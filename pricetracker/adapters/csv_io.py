from __future__ import annotations

import csv
import io
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date

from pricetracker.core.models import CATEGORIES, CATEGORY_KEYS, PriceEntry

LOGGER = logging.getLogger(__name__)

BOM = "\ufeff"
MIN_COLUMNS = 5

# (field, header) in file order; import relies on this order too.
COLUMNS: tuple[tuple[str, str], ...] = (
    ("id", "ID"),
    ("title", "產品標題"),
    ("brand", "品牌"),
    ("category", "類型"),
    ("price", "價格"),
    ("specification", "規格"),
    ("observed_on", "日期"),
    ("remark", "備註"),
    ("created_at", "創建時間"),
    ("url", "網址"),
)
REQUIRED_FIELDS = ("title", "brand", "category", "price")
_HEADERS = dict(COLUMNS)
_CATEGORY_BY_KEY = {key: category for key, category in zip(CATEGORY_KEYS, CATEGORIES)}


@dataclass(frozen=True, slots=True)
class CsvRowError:
    row: int
    error: str
    data: tuple[str, ...] = ()


@dataclass(slots=True)
class CsvImportResult:
    entries: list[PriceEntry] = field(default_factory=list)
    errors: list[CsvRowError] = field(default_factory=list)


def _cell(entry: PriceEntry, key: str) -> str:
    if key == "price":
        return f"{float(entry.price):.2f}"
    if key == "observed_on":
        return entry.observed_on.isoformat()
    if key == "created_at":
        return entry.created_at.strftime("%Y-%m-%d %H:%M:%S") if entry.created_at else ""

    value = getattr(entry, key)
    return "" if value is None else str(value)


def export_entries_csv(entries: Iterable[PriceEntry], columns: Sequence[str] | None = None) -> str:
    keys = [key for key, _ in COLUMNS if columns is None or key in columns]
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([_HEADERS[key] for key in keys])

    count = 0
    for entry in entries:
        writer.writerow([_cell(entry, key) for key in keys])
        count += 1

    LOGGER.debug("Exported %d entries as CSV", count)
    return BOM + buffer.getvalue()


def normalize_category(value: str) -> str | None:
    if value in CATEGORIES:
        return value
    return _CATEGORY_BY_KEY.get(value.lower())


def _normalize_url(value: str) -> str:
    url = value.strip()
    if url and not url.startswith(("http://", "https://")) and "." in url:
        return f"https://{url}"
    return url


def _row_to_entry(row: list[str], row_number: int) -> PriceEntry:
    if len(row) < MIN_COLUMNS:
        raise ValueError(
            f"Row {row_number}: Insufficient columns (minimum {MIN_COLUMNS} required: ID, Title, Brand, Type, Price)"
        )

    values = {key: (row[index].strip() if index < len(row) else "") for index, (key, _) in enumerate(COLUMNS)}

    for key in REQUIRED_FIELDS:
        if not values[key]:
            raise ValueError(f"Row {row_number}: {_HEADERS[key]} is required")

    category = normalize_category(values["category"])
    if category is None:
        valid = f"{', '.join(CATEGORIES)} or {', '.join(CATEGORY_KEYS)}"
        raise ValueError(f"Row {row_number}: Invalid type \"{values['category']}\". Must be one of: {valid}")

    try:
        price = float(values["price"])
    except ValueError:
        price = -1.0
    if price < 0 or price != price:
        raise ValueError(f"Row {row_number}: Invalid price \"{values['price']}\" (must be a positive number)")

    observed_on = date.today()
    if values["observed_on"]:
        try:
            observed_on = date.fromisoformat(values["observed_on"])
        except ValueError:
            raise ValueError(
                f"Row {row_number}: Invalid date format \"{values['observed_on']}\" (expected YYYY-MM-DD)"
            ) from None

    return PriceEntry(
        title=values["title"],
        brand=values["brand"],
        category=category,
        price=price,
        url=_normalize_url(values["url"]),
        specification=values["specification"] or None,
        observed_on=observed_on,
        remark=values["remark"] or None,
    )


def parse_entries_csv(text: str, *, skip_header: bool = True, delimiter: str = ",") -> CsvImportResult:
    result = CsvImportResult()
    reader = csv.reader(io.StringIO(text.removeprefix(BOM)), delimiter=delimiter)
    rows = [row for row in reader if any(cell.strip() for cell in row)]
    if not rows:
        result.errors.append(CsvRowError(row=0, error="CSV file is empty"))
        return result

    data_rows = rows[1:] if skip_header else rows
    first_row_number = 2 if skip_header else 1

    for offset, row in enumerate(data_rows):
        row_number = first_row_number + offset
        try:
            result.entries.append(_row_to_entry(row, row_number))
        except ValueError as exc:
            result.errors.append(CsvRowError(row=row_number, error=str(exc), data=tuple(row)))

    LOGGER.info("CSV import: %d entries, %d rejected rows", len(result.entries), len(result.errors))
    return result


def csv_template() -> str:
    sample = [
        "",
        "示例產品",
        "示例品牌",
        CATEGORIES[0],
        "99.99",
        "示例規格說明",
        date.today().isoformat(),
        "示例備註",
        "",
        "https://example.com/product",
    ]
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_ALL)
    writer.writerow([header for _, header in COLUMNS])
    writer.writerow(sample)
    return buffer.getvalue()
