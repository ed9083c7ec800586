"""Generic rule-table validator for import records."""

import logging
from datetime import datetime
from typing import Any

from zuq.models.base import utcnow
from zuq.repositories import Repositories

from .converters import is_present, is_valid_br_date, parse_number
from .errors import UnsupportedDataTypeError
from .records import ImportRecord, ValidationMetadata
from .rules import RULES, DuplicateContext, ImportRules

logger = logging.getLogger(__name__)


def get_rules(data_type: str) -> ImportRules:
    """Look up the rule table entry for a data type.

    Raises:
        UnsupportedDataTypeError: If the data type is unknown.
    """
    try:
        return RULES[data_type]
    except KeyError:
        raise UnsupportedDataTypeError(data_type) from None


def check_fields(data: dict[str, Any], rules: ImportRules) -> list[str]:
    """Return the field-level error messages for one row, in rule order."""
    errors: list[str] = []

    for name in rules.required:
        if not is_present(data.get(name)):
            errors.append(f"Campo {name} é obrigatório")

    for name, (label, allowed) in rules.enums.items():
        value = data.get(name)
        if is_present(value) and str(value).strip() not in allowed:
            errors.append(f"{label} deve ser: {', '.join(allowed)}")

    for check in rules.formats:
        value = data.get(check.field)
        if is_present(value) and not check.pattern.match(str(value).strip()):
            errors.append(check.message)

    for name, message in rules.numeric.items():
        value = data.get(name)
        if is_present(value) and parse_number(value) is None:
            errors.append(message)

    for name, message in rules.positive.items():
        value = data.get(name)
        if is_present(value):
            number = parse_number(value)
            if number is None or number <= 0 or not number.is_integer():
                errors.append(message)

    for name, message in rules.dates.items():
        value = data.get(name)
        if is_present(value) and not is_valid_br_date(value):
            errors.append(message)

    return errors


async def validate_records(
    rows: list[dict[str, Any]] | list[ImportRecord],
    data_type: str,
    repos: Repositories,
    now: datetime | None = None,
    movement_lookback_days: int = 30,
    order_lookback_days: int = 90,
) -> list[ImportRecord]:
    """Validate rows for a data type and flag duplicates of stored rows.

    Existing rows are loaded once per call. Row problems are collected on
    each record's ``validation``; nothing is raised for bad rows. Any
    previous validation, including operator approval, is discarded.

    Raises:
        UnsupportedDataTypeError: If the data type is unknown.
    """
    rules = get_rules(data_type)
    ctx = DuplicateContext(
        repos=repos,
        now=now or utcnow(),
        movement_lookback_days=movement_lookback_days,
        order_lookback_days=order_lookback_days,
    )
    existing = await rules.duplicate_rule.load(ctx)

    records: list[ImportRecord] = []
    for row in rows:
        data = row.data if isinstance(row, ImportRecord) else ImportRecord.from_row(row).data
        meta = ValidationMetadata()

        meta.errors = check_fields(data, rules)
        meta.has_errors = bool(meta.errors)

        if all(is_present(data.get(name)) for name in rules.duplicate_rule.key_fields):
            match = rules.duplicate_rule.find(data, existing)
            if match is not None:
                meta.is_duplicate = True
                meta.duplicate_id = match.row_id
                meta.duplicate_info.append(match.message)

        records.append(ImportRecord(data=dict(data), validation=meta))

    error_count = sum(1 for r in records if r.validation.has_errors)
    duplicate_count = sum(1 for r in records if r.validation.is_duplicate)
    logger.info(
        "Validated %d %s records: %d with errors, %d duplicates",
        len(records),
        data_type,
        error_count,
        duplicate_count,
    )
    return records
