"""
Error aggregator.
Groups per-record validation and save errors by record type and classifies severity.
"""
from typing import Any, Dict, Iterable, List, Mapping, Union

from hot22_dashboard.models.dto.hot22_dto import RawErrorGroup
from hot22_dashboard.models.record_errors import (
    ErrorGroup,
    RecordError,
    SaveError,
    Severity,
    ValidationError,
)

# Upper bound (inclusive, percent) of each band; above the last one is CRITICAL
SEVERITY_BANDS = (
    (5.0, Severity.LOW),
    (20.0, Severity.MEDIUM),
    (50.0, Severity.HIGH),
)

RawErrors = Union[Mapping[str, Any], Iterable[RecordError]]


def severity(error_count: int, total_records: int) -> Severity:
    """
    Classify an error rate.

    Args:
        error_count: Number of failed records
        total_records: Number of records processed

    Returns:
        Severity band for ``error_count / total_records`` as a percentage
    """
    if total_records <= 0:
        return Severity.UNKNOWN

    rate = error_count * 100 / total_records
    if rate <= 0:
        return Severity.NONE
    for upper_bound, band in SEVERITY_BANDS:
        if rate <= upper_bound:
            return band
    return Severity.CRITICAL


def aggregate(raw_errors: RawErrors) -> List[ErrorGroup]:
    """
    Build one ErrorGroup per record type, in first-seen order.

    Accepts either the backend ``errorsByType`` mapping or an iterable of
    tagged record errors.
    """
    if isinstance(raw_errors, Mapping):
        return [_group_from_raw(record_type, raw) for record_type, raw in raw_errors.items()]
    return _group_tagged(raw_errors)


def _group_from_raw(record_type: str, raw: Any) -> ErrorGroup:
    if not isinstance(raw, RawErrorGroup):
        raw = RawErrorGroup.model_validate(raw or {})

    validation_errors = tuple(
        ValidationError(
            line_number=item.line_number,
            message=item.message,
            raw_line=item.raw_line,
            details=item.details,
            record_type=record_type
        )
        for item in raw.validation_errors
    )
    save_errors = tuple(_save_message(item) for item in raw.save_errors)
    return ErrorGroup(record_type=record_type, validation_errors=validation_errors, save_errors=save_errors)


def _save_message(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        return str(item.get("message") or item.get("error") or item)
    return str(item)


def _group_tagged(errors: Iterable[RecordError]) -> List[ErrorGroup]:
    validation: Dict[str, List[ValidationError]] = {}
    saves: Dict[str, List[str]] = {}
    order: List[str] = []

    for error in errors:
        if not isinstance(error, (ValidationError, SaveError)):
            raise TypeError(f"Unsupported record error: {error!r}")
        record_type = error.record_type or "UNKNOWN"
        if record_type not in validation:
            order.append(record_type)
            validation[record_type] = []
            saves[record_type] = []

        if isinstance(error, ValidationError):
            validation[record_type].append(error)
        else:
            saves[record_type].append(error.message)

    return [
        ErrorGroup(
            record_type=record_type,
            validation_errors=tuple(validation[record_type]),
            save_errors=tuple(saves[record_type])
        )
        for record_type in order
    ]


def summarize(groups: Iterable[ErrorGroup], total_records: int) -> Dict[str, Any]:
    """Overall counts and severity across all groups."""
    groups = list(groups)
    validation_count = sum(len(group.validation_errors) for group in groups)
    save_count = sum(len(group.save_errors) for group in groups)
    total_errors = validation_count + save_count
    return {
        "total_errors": total_errors,
        "validation_errors": validation_count,
        "save_errors": save_count,
        "record_types": [group.record_type for group in groups],
        "severity": severity(total_errors, total_records),
    }
