import pytest

from core.history import ScenarioHistory, describe_changes
from loanquote.models import default_scenario


def test_describe_changes():
    base = default_scenario()
    assert describe_changes(None, base) == ["Initial scenario creation"]
    assert describe_changes(base, base) == ["Minor adjustments"]
    moved = base.model_copy(update={"purchase_price": 450000.0})
    assert describe_changes(base, moved) == ["Price: $500,000 -> $450,000"]


def test_record_and_restore():
    history = ScenarioHistory()
    first = history.record(default_scenario(), note="start")
    second = history.record(default_scenario(interest_rate=7.0))
    assert first.changes == ["Initial scenario creation"]
    assert second.changes == ["Rate: 6.5% -> 7.0%"]
    assert history.restore(first.id).interest_rate == 6.5
    with pytest.raises(KeyError):
        history.restore("missing")


def test_history_survives_serialization():
    history = ScenarioHistory()
    history.record(default_scenario(), note="start")
    history.record(default_scenario(loan_type="FHA"))
    restored = ScenarioHistory.from_dict(history.as_dict())
    assert [e.id for e in restored.entries] == [e.id for e in history.entries]
    assert restored.entries[1].snapshot == history.entries[1].snapshot
    assert restored.entries[0].note == "start"
