from __future__ import annotations

from typing import Any, Iterable, Sequence

from cryptoboard.services.normalize import Article

def detect_drift(existing: Iterable[Any], required_fields: Sequence[str], key_field: str) -> bool:
    """True when any stored row is missing a required field.

    A row whose stored dedup key no longer matches ``key_field`` also counts,
    so switching the configured key rebuilds the table instead of mixing keys.
    """
    for row in existing:
        for name in required_fields:
            if getattr(row, name, None) is None:
                return True
        if getattr(row, "dedup_key", None) != getattr(row, key_field, None):
            return True
    return False

def select_new(candidates: Iterable[Article], existing_keys: Iterable[str], key_field: str) -> tuple[list[Article], int]:
    """Return (candidates whose key is not stored yet, number of duplicates dropped).

    Keys are compared as exact, case-sensitive strings. Duplicates inside the
    incoming batch are collapsed to the first occurrence.
    """
    seen = set(existing_keys)
    fresh: list[Article] = []
    duplicates = 0
    for article in candidates:
        key = article.key(key_field)
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        fresh.append(article)
    return fresh, duplicates
