"""
Time entry records as read from the time-entry store.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Iterable, Optional

import pandas as pd

from capacity_os.config import REQUIRED_COLUMNS, OPTIONAL_COLUMNS
from capacity_os.data.schema import parse_timestamps


ENTRY_COLUMNS = REQUIRED_COLUMNS["time_entries"] + OPTIONAL_COLUMNS["time_entries"]


@dataclass(frozen=True)
class TimeEntry:
    """One logged block of work. Read-only to the capacity model."""
    id: str
    charge_code: str
    category: Optional[str]
    duration_minutes: int
    timestamp: datetime
    notes: Optional[str] = None
    user_email: Optional[str] = None

    @property
    def hours(self) -> float:
        return self.duration_minutes / 60


def entries_to_frame(entries: Iterable[TimeEntry]) -> pd.DataFrame:
    """Build the canonical time-entry frame from records."""
    rows = [asdict(e) for e in entries]
    df = pd.DataFrame(rows, columns=ENTRY_COLUMNS)
    df["duration_minutes"] = pd.to_numeric(df["duration_minutes"], errors="coerce").fillna(0)
    df["timestamp"] = parse_timestamps(df["timestamp"])
    return df
