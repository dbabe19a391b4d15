from __future__ import annotations

import csv
import logging
from dataclasses import dataclass, field
from io import StringIO
from typing import Dict, Iterable, List, Optional, Sequence

from engine_errors import InvalidInputError
from normalize_costs import validate_record
from payloads import record_from_mapping
from subscription_model import BillingCycle, SubscriptionRecord, canonicalize_category

logger = logging.getLogger(__name__)

IMPORT_COLUMNS = ("name", "cost", "billing_cycle", "category", "next_billing_date", "last_used", "notes")
OPTIONAL_IMPORT_COLUMNS = ("status", "id", "created_at")
EXPORT_COLUMNS = ("name", "cost", "billing_cycle", "category", "next_billing_date", "last_used", "status", "notes")


@dataclass(slots=True)
class ImportWarning:
    """A CSV row that was skipped, with the 1-based line it came from."""

    line_number: int
    message: str


@dataclass(slots=True)
class CsvImportResult:
    records: List[SubscriptionRecord] = field(default_factory=list)
    warnings: List[ImportWarning] = field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.records)


def parse_subscriptions_csv(content: str | bytes) -> CsvImportResult:
    """
    Parse an exported (or hand-written) subscription table.

    Rows missing a name or cost, or carrying values that fail validation, are skipped
    and reported as warnings instead of aborting the whole import.
    """
    text = _decode_bytes(content) if isinstance(content, bytes) else content
    reader = csv.DictReader(StringIO(text), restval="")
    result = CsvImportResult()

    if not reader.fieldnames:
        result.warnings.append(ImportWarning(line_number=1, message="CSV file is missing a header row."))
        return result

    columns = _map_columns(reader.fieldnames)
    missing = [column for column in ("name", "cost") if column not in columns]
    if missing:
        result.warnings.append(
            ImportWarning(line_number=1, message=f"Required column(s) not found: {', '.join(missing)}.")
        )
        return result

    for row in reader:
        line_number = reader.line_num
        values = {column: _cell(row, header) for column, header in columns.items()}
        if not any(values.values()):
            continue

        if not values.get("name") or not values.get("cost"):
            _skip(result, line_number, "Row is missing a name or cost.")
            continue

        values.setdefault("id", "")
        if not values["id"]:
            values["id"] = f"row-{line_number - 1}"
        values["category"] = canonicalize_category(values.get("category"))

        try:
            result.records.append(record_from_mapping(values))
        except InvalidInputError as exc:
            _skip(result, line_number, str(exc))

    logger.debug(
        "Parsed subscription CSV",
        extra={"imported_count": result.imported_count, "skipped_count": len(result.warnings)},
    )
    return result


def export_subscriptions_csv(records: Iterable[SubscriptionRecord]) -> str:
    """Serialize records to CSV with the export header (import columns plus status)."""
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)
    for record in records:
        validate_record(record)
        writer.writerow(
            [
                record.name,
                f"{float(record.cost):.2f}",
                _cycle_label(record.billing_cycle),
                record.category,
                record.next_billing_date.isoformat() if record.next_billing_date else "",
                record.last_used.isoformat() if record.last_used else "",
                record.status.value,
                record.notes or "",
            ]
        )
    return buffer.getvalue()


def _cycle_label(cycle: BillingCycle | str) -> str:
    # Unrecognised cycles are written back as monthly, which is how they were priced.
    parsed = BillingCycle.parse(cycle)
    if parsed is BillingCycle.UNRECOGNIZED:
        return BillingCycle.MONTHLY.value
    return parsed.value


def _skip(result: CsvImportResult, line_number: int, message: str) -> None:
    logger.warning("Skipping CSV row %s: %s", line_number, message)
    result.warnings.append(ImportWarning(line_number=line_number, message=message))


def _decode_bytes(file_bytes: bytes) -> str:
    for encoding in ("utf-8-sig", "utf-8", "latin-1"):
        try:
            return file_bytes.decode(encoding)
        except UnicodeDecodeError:
            continue
    return file_bytes.decode("utf-8", errors="ignore")


def _map_columns(headers: Sequence[Optional[str]]) -> Dict[str, str]:
    known = set(IMPORT_COLUMNS) | set(OPTIONAL_IMPORT_COLUMNS)
    columns: Dict[str, str] = {}
    for header in headers:
        if header is None:
            continue
        normalized = header.strip().lower().replace(" ", "_")
        if normalized in known and normalized not in columns:
            columns[normalized] = header
    return columns


def _cell(row: Dict[str, Optional[str]], header: str) -> str:
    value = row.get(header)
    return value.strip() if isinstance(value, str) else ""
