"""
Search and sort helpers shared by the list endpoints.

Searching is a case‑insensitive substring match over a set of text
fields.  Sorting compares strings case‑insensitively; an order of
``None``/``"none"`` leaves items in insertion order.
"""

from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")

SORT_ORDERS = {"asc", "desc", "none"}


def matches_search(item: Any, term: Optional[str], fields: Sequence[str]) -> bool:
    """Return ``True`` if ``term`` occurs in any of ``fields`` of ``item``."""
    if not term:
        return True
    needle = term.lower()
    return any(needle in str(getattr(item, name, "") or "").lower() for name in fields)


def sort_items(
    items: Iterable[T],
    sort_by: Optional[str],
    order: Optional[str],
    allowed: Sequence[str],
    default: str,
    key: Optional[Callable[[T, str], Any]] = None,
) -> List[T]:
    """Sort ``items`` by the attribute ``sort_by``.

    Unknown fields fall back to ``default`` and unknown orders to
    ``asc``, as the admin tables do.  ``key`` can supply computed sort
    values; by default the attribute is read from the item.
    """
    result = list(items)
    order = (order or "none").lower()
    if order not in SORT_ORDERS:
        order = "asc"
    if order == "none":
        return result
    if sort_by not in allowed:
        sort_by = default

    def _value(item: T) -> Any:
        value = key(item, sort_by) if key else getattr(item, sort_by)
        if isinstance(value, str):
            return value.lower()
        return value

    result.sort(key=_value, reverse=(order == "desc"))
    return result
