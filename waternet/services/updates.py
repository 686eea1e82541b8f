"""Partial-update helper shared by node, pipe and user writes."""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

# Columns a client body can never overwrite, whatever it sends.
PROTECTED_COLUMNS = frozenset({"id", "kind", "created_at", "updated_at"})


def apply_changes(instance: Any, changes: Mapping[str, Any]) -> bool:
    """
    Copy `changes` onto `instance`, skipping protected columns and unchanged values.

    Stamps `updated_at` only when at least one stored value actually changed.
    Returns whether anything changed.
    """
    changed = False
    for column, value in changes.items():
        if column in PROTECTED_COLUMNS:
            continue
        if getattr(instance, column) != value:
            setattr(instance, column, value)
            changed = True
    if changed:
        instance.updated_at = datetime.now(UTC)
    return changed
