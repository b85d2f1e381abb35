from __future__ import annotations

from typing import Iterable, List, Set


def dedup_trends(groups: Iterable[Iterable[str]]) -> List[str]:
    """
    Concatenate per-source trend lists and drop repeated labels.
    Labels compare by exact string equality; the first occurrence wins and
    the overall order is preserved.
    """
    seen: Set[str] = set()
    out: List[str] = []

    for group in groups:
        for label in group:
            if label in seen:
                continue
            seen.add(label)
            out.append(label)
    return out
