"""
Search and status filtering for visitor lists
"""

from enum import Enum
from typing import Dict, Iterable, List

from ..schemas import Visitor


class StatusFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    SIGNED_OUT = "signed-out"


STATUS_FILTER_LABELS = {
    StatusFilter.ALL: "All Visitors",
    StatusFilter.ACTIVE: "Active Only",
    StatusFilter.SIGNED_OUT: "Signed Out Only",
}


def matches_search(visitor: Visitor, term: str) -> bool:
    """Case-insensitive substring match on first name, last name or purpose"""
    if not term:
        return True
    needle = term.lower()
    return (
        needle in visitor.firstname.lower()
        or needle in visitor.lastname.lower()
        or needle in visitor.purpose_of_visit.lower()
    )


def matches_status(visitor: Visitor, status: StatusFilter) -> bool:
    status = StatusFilter(status)
    if status == StatusFilter.ACTIVE:
        return visitor.is_active
    if status == StatusFilter.SIGNED_OUT:
        return not visitor.is_active
    return True


def filter_visitors(
    visitors: Iterable[Visitor],
    term: str = "",
    status: StatusFilter = StatusFilter.ALL
) -> List[Visitor]:
    return [
        v for v in visitors
        if matches_search(v, term) and matches_status(v, status)
    ]


def is_filtered(term: str, status: StatusFilter) -> bool:
    """True when a search term or a status other than 'all' is applied"""
    return bool(term) or StatusFilter(status) != StatusFilter.ALL


def visitor_stats(visitors: Iterable[Visitor]) -> Dict[str, int]:
    visitors = list(visitors)
    active = sum(1 for v in visitors if v.is_active)
    return {
        "total": len(visitors),
        "active": active,
        "signed_out": len(visitors) - active,
    }
