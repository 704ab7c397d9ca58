"""
Header alias resolution for hand-maintained sheet tabs.

Column headers in the workbook get renamed, translated and padded with
spaces over time. Every read goes through ``get_value`` so a logical field
resolves against its list of acceptable headers, exact match first and
then case/whitespace-insensitive.
"""
from typing import Any, Dict, Iterable, List, Optional


def normalize_header(header: Any) -> str:
    return str(header).strip().lower()


def find_key(row: Dict[str, Any], aliases: Iterable[str]) -> Optional[str]:
    """Return the actual key in ``row`` that matches one of ``aliases``."""
    keys = list(row.keys())
    for alias in aliases:
        if alias in row:
            return alias
        wanted = normalize_header(alias)
        for key in keys:
            if normalize_header(key) == wanted:
                return key
    return None


def get_value(row: Dict[str, Any], aliases: Iterable[str], default: Any = None) -> Any:
    """
    Look up a logical field in a row dict keyed by sheet headers.

    Empty cells count as present: ``""`` is returned as-is, and callers
    decide whether it should fall back to a default.
    """
    key = find_key(row, aliases)
    if key is None:
        return default
    return row[key]


def find_column(headers: List[str], aliases: Iterable[str]) -> Optional[int]:
    """
    Return the 1-based column index of a logical field in a header row,
    or None when no alias matches.
    """
    normalized = [normalize_header(h) for h in headers]
    for alias in aliases:
        if alias in headers:
            return headers.index(alias) + 1
        wanted = normalize_header(alias)
        if wanted in normalized:
            return normalized.index(wanted) + 1
    return None


def rows_to_records(values: List[List[Any]]) -> List[Dict[str, Any]]:
    """Convert ``get_all_values()`` output into header-keyed dicts."""
    if not values:
        return []
    headers = [str(h) for h in values[0]]
    records = []
    for row in values[1:]:
        padded = list(row) + [""] * (len(headers) - len(row))
        records.append({headers[i]: padded[i] for i in range(len(headers))})
    return records
