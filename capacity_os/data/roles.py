"""
Role categories and their staffing-bucket membership.

Single source of truth for: which logged category counts against which
staffing pool, and which pools belong to each division.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

import pandas as pd


class Role(str, Enum):
    """Category tags emitted by the time-entry store."""
    ADVISOR = "advisor"
    SUPPORT = "support"
    PREPARER_L1 = "preparer_l1"
    PREPARER_L2 = "preparer_l2"
    REVIEWER = "reviewer"
    PROJECT_MANAGER = "project_manager"


class Bucket(str, Enum):
    """Staffing pools with their own headcount and capacity."""
    ADVISORS = "advisors"
    SUPPORT = "support"
    PREPARERS = "preparers"
    REVIEWERS = "reviewers"

    @property
    def label(self) -> str:
        return BUCKET_LABELS[self]


class Division(str, Enum):
    PLANNING = "planning"
    PREPARATION = "preparation"


BUCKET_LABELS: Dict[Bucket, str] = {
    Bucket.ADVISORS: "Advisors",
    Bucket.SUPPORT: "Support",
    Bucket.PREPARERS: "Preparers",
    Bucket.REVIEWERS: "Reviewers",
}

BUCKET_MEMBERSHIP: Dict[Bucket, FrozenSet[Role]] = {
    Bucket.ADVISORS: frozenset({Role.ADVISOR}),
    Bucket.SUPPORT: frozenset({Role.SUPPORT}),
    Bucket.PREPARERS: frozenset({Role.PREPARER_L1, Role.PREPARER_L2}),
    Bucket.REVIEWERS: frozenset({Role.REVIEWER, Role.PROJECT_MANAGER}),
}

# First bucket of each division is the one growth projections are drawn for
DIVISION_BUCKETS: Dict[Division, Tuple[Bucket, ...]] = {
    Division.PLANNING: (Bucket.ADVISORS, Bucket.SUPPORT),
    Division.PREPARATION: (Bucket.PREPARERS, Bucket.REVIEWERS),
}

# Entries logged before category tagging existed carry no category
UNTAGGED_BUCKET = Bucket.ADVISORS

_ROLE_TO_BUCKET: Dict[str, Bucket] = {
    role.value: bucket
    for bucket, roles in BUCKET_MEMBERSHIP.items()
    for role in roles
}


def bucket_for_category(category: Optional[str]) -> Optional[Bucket]:
    """
    Resolve a raw category tag to its bucket.

    Returns None for tags outside the membership table.
    """
    if category is None:
        return UNTAGGED_BUCKET
    if not isinstance(category, str):
        # NaN from a sparse frame column
        return UNTAGGED_BUCKET if pd.isna(category) else None
    key = category.strip().lower()
    if key == "":
        return UNTAGGED_BUCKET
    return _ROLE_TO_BUCKET.get(key)


def primary_bucket(division: Division) -> Bucket:
    return DIVISION_BUCKETS[division][0]
