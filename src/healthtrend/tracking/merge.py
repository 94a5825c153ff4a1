"""Collapse duplicate same-day entries into one row per date.

Imports may deliver a day that already exists. The existing row keeps its
values unless the incoming row supplies one; an absent incoming value never
erases a present one.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from healthtrend.tracking.models import METRIC_FIELDS, HealthEntry


def merge_entry(existing: HealthEntry, incoming: HealthEntry) -> HealthEntry:
    """Merge two entries for the same date field by field.

    Present incoming values win. The data source follows the incoming entry
    only when it contributed at least one value.

    Raises:
        ValueError: If the entries are for different dates
    """
    if existing.date != incoming.date:
        raise ValueError(
            f"cannot merge entries for different dates: {existing.date} and {incoming.date}"
        )

    updates = {
        name: getattr(incoming, name)
        for name in METRIC_FIELDS
        if getattr(incoming, name) is not None
    }
    if updates:
        updates["data_source"] = incoming.data_source
    return replace(existing, **updates)


def merge_entries(entries: Iterable[HealthEntry]) -> list[HealthEntry]:
    """Merge duplicates in arrival order and return entries sorted by date."""
    by_date: dict = {}
    for entry in entries:
        current = by_date.get(entry.date)
        by_date[entry.date] = entry if current is None else merge_entry(current, entry)
    return [by_date[day] for day in sorted(by_date)]
