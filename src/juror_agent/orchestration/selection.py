from __future__ import annotations

from collections.abc import Iterable


def _sort_key(dispute_id: str) -> tuple[int, int, str]:
    try:
        return (0, int(dispute_id), dispute_id)
    except ValueError:
        return (1, 0, dispute_id)


def order_assignments(dispute_ids: Iterable[str]) -> list[str]:
    """De-duplicate and order by lowest numeric dispute id; non-numeric ids go last."""
    return sorted(set(dispute_ids), key=_sort_key)


def select_assignment(dispute_ids: Iterable[str]) -> str | None:
    ordered = order_assignments(dispute_ids)
    return ordered[0] if ordered else None
