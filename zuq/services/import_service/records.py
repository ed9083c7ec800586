"""Import records and the duplicate approval step.

An ImportRecord keeps the parsed business fields (``data``) apart from the
pipeline flags (``validation``).
"""

from typing import Any, Union

from pydantic import BaseModel, Field

CellValue = Union[str, int, float]


class ValidationMetadata(BaseModel):
    """Validation outcome and operator decision for one record."""

    has_errors: bool = False
    errors: list[str] = Field(default_factory=list)
    is_duplicate: bool = False
    duplicate_info: list[str] = Field(default_factory=list)
    duplicate_id: str | None = None
    user_approved: bool = False


class ImportRecord(BaseModel):
    """One parsed row plus its validation metadata."""

    data: dict[str, CellValue] = Field(default_factory=dict)
    validation: ValidationMetadata = Field(default_factory=ValidationMetadata)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ImportRecord":
        """Wrap a parsed row; None cells become empty strings."""
        return cls(data={key: "" if value is None else value for key, value in row.items()})

    @property
    def is_importable(self) -> bool:
        meta = self.validation
        if meta.has_errors:
            return False
        return not meta.is_duplicate or meta.user_approved


class ImportSummary(BaseModel):
    """Counts shown in the import preview."""

    total: int = 0
    valid: int = 0
    errors: int = 0
    duplicates: int = 0
    approved_duplicates: int = 0
    importable: int = 0


def approve_all_duplicates(records: list[ImportRecord]) -> list[ImportRecord]:
    """Approve every duplicate record; other records are left untouched."""
    for record in records:
        if record.validation.is_duplicate:
            record.validation.user_approved = True
    return records


def reject_all_duplicates(records: list[ImportRecord]) -> list[ImportRecord]:
    """Reject every duplicate record; other records are left untouched."""
    for record in records:
        if record.validation.is_duplicate:
            record.validation.user_approved = False
    return records


def set_approval(records: list[ImportRecord], index: int, approved: bool) -> list[ImportRecord]:
    """Record the operator decision for a single record.

    Raises:
        IndexError: If index is outside the record list.
    """
    if index < 0 or index >= len(records):
        raise IndexError(f"Record index out of range: {index}")
    records[index].validation.user_approved = approved
    return records


def importable_records(records: list[ImportRecord]) -> list[ImportRecord]:
    """Records the persister may write: error-free, and either unique or approved."""
    return [record for record in records if record.is_importable]


def summarize(records: list[ImportRecord]) -> ImportSummary:
    summary = ImportSummary(total=len(records))
    for record in records:
        meta = record.validation
        if meta.has_errors:
            summary.errors += 1
        elif not meta.is_duplicate:
            summary.valid += 1
        if meta.is_duplicate:
            summary.duplicates += 1
            if meta.user_approved:
                summary.approved_duplicates += 1
        if record.is_importable:
            summary.importable += 1
    return summary
