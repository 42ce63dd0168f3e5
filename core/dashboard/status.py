"""
Status group-by folding.
"""
from typing import Dict, Iterable, Optional, Tuple

UNKNOWN_STATUS = "Unknown"


def fold_status_breakdown(pairs: Iterable[Tuple[Optional[str], int]]) -> Dict[str, int]:
    """Turn ``(label, count)`` pairs into ``{label: count}``.

    Missing or empty labels are counted under ``Unknown``; labels that end up
    equal after folding are summed.
    """
    breakdown: Dict[str, int] = {}
    for label, count in pairs:
        key = label if label else UNKNOWN_STATUS
        breakdown[key] = breakdown.get(key, 0) + count
    return breakdown
