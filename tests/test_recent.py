from random import Random

import pytest

from gitgraph.rendering.recent import RecentMessages


def test_buffer_evicts_oldest_when_full() -> None:
    recent = RecentMessages(capacity=2)

    recent.add("ONE")
    recent.add("TWO")
    recent.add("THREE")

    assert list(recent) == ["TWO", "THREE"]
    assert "ONE" not in recent
    assert len(recent) == 2


def test_pick_fresh_skips_recent_messages_and_records_choice() -> None:
    recent = RecentMessages(capacity=5)
    recent.add("PUSH TO PRODUCTION")

    picked = recent.pick_fresh(
        ["PUSH TO PRODUCTION", "SHIP IT FRIDAY"], Random(7), attempts=50
    )

    assert picked == "SHIP IT FRIDAY"
    assert "SHIP IT FRIDAY" in recent


def test_pick_fresh_gives_up_when_everything_is_recent() -> None:
    recent = RecentMessages()
    recent.add("ONLY")

    assert recent.pick_fresh(["ONLY"], Random(1)) is None
    assert recent.pick_fresh([], Random(1)) is None


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RecentMessages(capacity=0)
