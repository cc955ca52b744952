"""Scenario version history."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from loanquote.models import Scenario

# (attribute, label, formatter) tracked when describing a new version
TRACKED_FIELDS = [
    ("purchase_price", "Price", lambda v: f"${v:,.0f}"),
    ("down_payment_amount", "Down Payment", lambda v: f"${v:,.0f}"),
    ("interest_rate", "Rate", lambda v: f"{v}%"),
    ("loan_term_months", "Term", lambda v: f"{v} mo"),
    ("loan_type", "Loan Type", lambda v: v.value),
    ("occupancy_type", "Occupancy", lambda v: v.value),
]


def describe_changes(old: Optional[Scenario], new: Scenario) -> List[str]:
    """Human-readable differences between two versions of a scenario."""
    if old is None:
        return ["Initial scenario creation"]
    changes = []
    for attr, label, fmt in TRACKED_FIELDS:
        before, after = getattr(old, attr), getattr(new, attr)
        if before != after:
            changes.append(f"{label}: {fmt(before)} -> {fmt(after)}")
    return changes or ["Minor adjustments"]


@dataclass
class HistoryEntry:
    id: str
    timestamp: datetime
    note: str
    changes: List[str]
    snapshot: Scenario


@dataclass
class ScenarioHistory:
    """In-memory version log for a single scenario."""

    entries: List[HistoryEntry] = field(default_factory=list)

    def record(self, scenario: Scenario, note: str = "") -> HistoryEntry:
        """Snapshot ``scenario`` with the changes since the last version."""
        last = self.entries[-1].snapshot if self.entries else None
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            note=note,
            changes=describe_changes(last, scenario),
            snapshot=scenario,
        )
        self.entries.append(entry)
        return entry

    def restore(self, entry_id: str) -> Scenario:
        for entry in self.entries:
            if entry.id == entry_id:
                return entry.snapshot
        raise KeyError(entry_id)

    def as_dict(self) -> List[dict]:
        """Return entries as dictionaries for persistence or inspection."""
        return [
            {
                "id": e.id,
                "timestamp": e.timestamp.isoformat(),
                "note": e.note,
                "changes": list(e.changes),
                "snapshot": e.snapshot.model_dump(mode="json"),
            }
            for e in self.entries
        ]

    @classmethod
    def from_dict(cls, rows: List[dict]) -> "ScenarioHistory":
        return cls(
            entries=[
                HistoryEntry(
                    id=r["id"],
                    timestamp=datetime.fromisoformat(r["timestamp"]),
                    note=r.get("note", ""),
                    changes=list(r.get("changes", [])),
                    snapshot=Scenario.model_validate(r["snapshot"]),
                )
                for r in rows
            ]
        )
