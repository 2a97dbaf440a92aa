"""Product CSV Import - parse and validate bulk product uploads from the admin console.

Invariants:
    - Header must contain every REQUIRED_COLUMNS entry; otherwise one file-level error
    - Row errors never abort the remaining rows
    - Line numbers are 1-based and count the header as line 1
    - Parsed rows carry category_slug unresolved; the service maps it to category_id
    - line_numbers[i] is the CSV line rows[i] came from, so later checks can report it

Design Decisions:
    - Pure parser, no DB access: the shell resolves slugs and inserts
    - Booleans accept true/false/1/0/yes/no (spreadsheet exports vary)
"""

import csv
import io
from dataclasses import dataclass, field

TEMPLATE_COLUMNS = (
    "name", "slug", "description", "price", "discount_price",
    "is_discount", "is_feature", "category_slug", "image_url", "stock",
    "variation1", "variation2",
)
REQUIRED_COLUMNS = ("name", "slug", "price")

_TRUE = {"true", "1", "yes", "y"}
_FALSE = {"false", "0", "no", "n", ""}


@dataclass
class ImportRowError:
    line: int
    message: str

    def as_dict(self) -> dict:
        return {"line": self.line, "message": self.message}


@dataclass
class ImportResult:
    rows: list[dict] = field(default_factory=list)
    line_numbers: list[int] = field(default_factory=list)
    errors: list[ImportRowError] = field(default_factory=list)


def template_csv() -> str:
    """Header plus one sample row, for the admin 'download template' button."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(TEMPLATE_COLUMNS)
    writer.writerow([
        "Sample Product", "sample-product",
        "This is a sample product description", "99.99", "79.99",
        "true", "false", "skincare", "https://example.com/image.jpg",
        "50", "50ml", "Cream",
    ])
    return buf.getvalue()


def parse_product_csv(text: str) -> ImportResult:
    """Parse CSV text into product dicts plus per-line errors."""
    result = ImportResult()
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    header = [h.strip() for h in (reader.fieldnames or [])]
    missing = [c for c in REQUIRED_COLUMNS if c not in header]
    if missing:
        result.errors.append(ImportRowError(
            1, f"Missing required columns: {', '.join(missing)}",
        ))
        return result

    for line, raw in enumerate(reader, start=2):
        row = {
            (k or "").strip(): (v or "").strip()
            for k, v in raw.items() if k is not None
        }
        if not any(row.values()):
            continue
        try:
            parsed = _parse_row(row)
        except ValueError as e:
            result.errors.append(ImportRowError(line, str(e)))
            continue
        result.rows.append(parsed)
        result.line_numbers.append(line)
    return result


def _parse_row(row: dict) -> dict:
    for col in REQUIRED_COLUMNS:
        if not row.get(col):
            raise ValueError(f"'{col}' is required")

    price = _parse_float(row, "price")
    discount_price = _parse_float(row, "discount_price")
    if price is None or price < 0:
        raise ValueError("'price' must be a non-negative number")
    if discount_price is not None and discount_price < 0:
        raise ValueError("'discount_price' must be a non-negative number")

    stock = row.get("stock") or "0"
    try:
        stock_value = int(stock)
    except ValueError:
        raise ValueError(f"'stock' must be an integer, got '{stock}'")

    return {
        "name": row["name"],
        "slug": row["slug"],
        "description": row.get("description") or None,
        "price": price,
        "discount_price": discount_price,
        "is_discount": _parse_bool(row, "is_discount"),
        "is_feature": _parse_bool(row, "is_feature"),
        "category_slug": row.get("category_slug") or None,
        "image_url": row.get("image_url") or None,
        "stock": stock_value,
        "variation1": row.get("variation1") or None,
        "variation2": row.get("variation2") or None,
    }


def _parse_float(row: dict, col: str) -> float | None:
    value = row.get(col)
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"'{col}' must be a number, got '{value}'")


def _parse_bool(row: dict, col: str) -> bool:
    value = (row.get(col) or "").lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"'{col}' must be true or false, got '{row.get(col)}'")
