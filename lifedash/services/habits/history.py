"""
History normalization - reads stored habit history into HistoryEntry items

Older records stored history as bare date or timestamp strings meaning
"completed on that day"; newer records store {"date", "status"} objects.
Both shapes are converted here, once, so the engine only ever sees
HistoryEntry values.
"""
from datetime import date, datetime
from typing import Any, Iterable, List, Optional
import logging

from lifedash.models.habit import HabitStatus, HistoryEntry
from lifedash.utils.timezone import to_date

logger = logging.getLogger(__name__)


def _parse_day(value: Any) -> Optional[date]:
    if isinstance(value, (date, datetime)):
        return to_date(value)
    if isinstance(value, str):
        try:
            return to_date(value)
        except ValueError:
            return None
    return None


def normalize_entry(item: Any) -> Optional[HistoryEntry]:
    """
    Convert one stored history item into a HistoryEntry

    Args:
        item: A HistoryEntry, a mapping with 'date' and 'status',
              or a legacy bare date/timestamp string (or date object)

    Returns:
        HistoryEntry, or None if the item cannot be interpreted
    """
    if isinstance(item, HistoryEntry):
        return item

    if isinstance(item, dict):
        day = _parse_day(item.get("date"))
        if day is None:
            return None
        # Only bare legacy strings imply completion; a mapping must say so
        raw_status = item.get("status")
        if raw_status is None:
            return None
        try:
            return HistoryEntry(date=day, status=HabitStatus(raw_status))
        except ValueError:
            return None

    # Legacy format: the presence of a date means it was completed
    day = _parse_day(item)
    if day is None:
        return None
    return HistoryEntry(date=day, status=HabitStatus.COMPLETED)


def normalize_history(raw: Optional[Iterable[Any]]) -> List[HistoryEntry]:
    """
    Normalize a stored history collection

    Malformed items are logged and skipped. When two items share a date the
    first one wins, matching a first-match lookup over the stored order.

    Args:
        raw: Stored history (list of strings and/or mappings), or None

    Returns:
        List of HistoryEntry sorted by date descending
    """
    if raw is None:
        return []
    if isinstance(raw, (str, bytes, dict)):
        logger.warning(f"Ignoring history that is not a list: {raw!r}")
        return []

    entries = {}
    for item in raw:
        entry = normalize_entry(item)
        if entry is None:
            logger.warning(f"Skipping malformed history entry: {item!r}")
            continue
        if entry.date in entries:
            logger.warning(f"Skipping duplicate history entry for {entry.date}")
            continue
        entries[entry.date] = entry

    return sort_history(entries.values())


def sort_history(entries: Iterable[HistoryEntry]) -> List[HistoryEntry]:
    """Sort entries newest first"""
    return sorted(entries, key=lambda e: e.date, reverse=True)


def serialize_history(entries: Iterable[HistoryEntry]) -> List[dict]:
    """
    Convert entries to the JSON shape written to the record store

    Returns:
        List of {"date": "YYYY-MM-DD", "status": "completed" | "failed"}
    """
    return [entry.model_dump(mode="json") for entry in sort_history(entries)]
