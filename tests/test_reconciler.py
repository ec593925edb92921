"""
Unit tests for the feed reconciler.
"""
import logging

from autocade.core import BoardSnapshot, Numbered, Throw
from autocade.feed import FeedReconciler, ThrowAdded, ThrowRemoved, TurnEnded


def t(number, multiplier=1):
    return Throw(Numbered(number, multiplier))


def snap(throws, status="Throw", event="Throw detected"):
    return BoardSnapshot.create(throws, status=status, event=event)


def test_growth_emits_one_event_per_dart():
    """New darts are emitted in order with their index."""
    rec = FeedReconciler()

    events = rec.reconcile(snap([t(20, 3)]))
    assert events == [ThrowAdded(t(20, 3), 0)]

    events = rec.reconcile(snap([t(20, 3), t(5), t(1)]))
    assert events == [ThrowAdded(t(5), 1), ThrowAdded(t(1), 2)]


def test_repeated_snapshot_is_idempotent():
    """Delivering the same snapshot twice emits nothing the second time."""
    rec = FeedReconciler()
    s = snap([t(20), t(19)])

    assert len(rec.reconcile(s)) == 2
    assert rec.reconcile(s) == []
    assert rec.reconcile(s) == []


def test_fourth_dart_ignored(caplog):
    """Only the first three darts of a turn produce events."""
    rec = FeedReconciler()
    throws = [t(1), t(2), t(3), t(4)]

    with caplog.at_level(logging.WARNING):
        events = rec.reconcile(snap(throws))

    assert [e.index for e in events] == [0, 1, 2]
    assert "ignoring beyond 3" in caplog.text


def test_undo_removes_last_dart():
    """Shrink with an undo marker emits ThrowRemoved for the dropped dart."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(20), t(5)]))

    events = rec.reconcile(snap([t(20)], event="Throw removed"))
    assert events == [ThrowRemoved(t(5))]
    assert rec.previous_names == ["S20"]


def test_undo_of_several_darts_tail_first():
    """Each dropped dart gets its own ThrowRemoved, last dart first."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(1), t(2), t(3)]))

    events = rec.reconcile(snap([t(1)], event="Throw removed"))
    assert events == [ThrowRemoved(t(3)), ThrowRemoved(t(2))]


def test_undo_wins_over_takeout_in_progress():
    """An undo marker is honoured even while the takeout is running."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(1), t(2)]))

    events = rec.reconcile(snap([t(1)], status="Takeout in progress", event="Throw removed"))
    assert events == [ThrowRemoved(t(2))]


def test_takeout_in_progress_is_silent():
    """Pulling darts out emits nothing until the takeout finishes."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(1), t(2), t(3)]))

    assert rec.reconcile(snap([t(1), t(2)], status="Takeout in progress", event="Takeout started")) == []
    assert rec.reconcile(snap([t(1)], status="Takeout in progress", event="Takeout started")) == []
    assert rec.reconcile(snap([], status="Takeout in progress", event="Takeout started")) == []

    events = rec.reconcile(snap([], status="Takeout finished", event="Takeout finished"))
    assert events == [TurnEnded()]


def test_finished_takeout_ends_turn():
    """Board cleared in one step with takeout finished ends the turn."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(20)]))

    events = rec.reconcile(snap([], status="Takeout finished", event="Takeout finished"))
    assert events == [TurnEnded()]

    # Nothing happened since: no second TurnEnded
    assert rec.reconcile(snap([], status="Takeout finished", event="Takeout finished")) == []


def test_reset_ends_turn():
    """A reset event on an emptied board ends the turn."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(7)]))

    assert rec.reconcile(snap([], event="Reset")) == [TurnEnded()]


def test_takeout_without_darts_is_silent():
    """A finished takeout with no darts this turn emits nothing."""
    rec = FeedReconciler()
    assert rec.reconcile(snap([], status="Takeout finished", event="Takeout finished")) == []


def test_turn_closed_by_next_dart():
    """Board cleared during a takeout that never finished; next dart closes the turn."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(1)]))
    rec.reconcile(snap([], status="Takeout in progress", event="Takeout started"))

    events = rec.reconcile(snap([t(2)]))
    assert events == [TurnEnded(), ThrowAdded(t(2), 0)]


def test_undo_of_all_darts_does_not_end_turn():
    """Undoing every dart leaves the turn without a TurnEnded."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(1)]))

    assert rec.reconcile(snap([], event="Throw removed")) == [ThrowRemoved(t(1))]
    assert rec.reconcile(snap([], status="Takeout finished", event="Takeout finished")) == []


def test_ambiguous_snapshot_keeps_memory(caplog):
    """Undo + takeout finished on an empty board emits nothing and keeps memory."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(1)]))

    ambiguous = snap([], status="Takeout finished", event="Throw removed")
    with caplog.at_level(logging.WARNING):
        assert rec.reconcile(ambiguous) == []
        assert rec.reconcile(ambiguous) == []

    assert rec.previous_names == ["S1"]
    assert rec.ambiguous_snapshots == 2
    assert "Ambiguous" in caplog.text

    # A clean finished takeout still ends the turn afterwards
    events = rec.reconcile(snap([], status="Takeout finished", event="Takeout finished"))
    assert events == [TurnEnded()]


def test_unexplained_shrink_keeps_memory():
    """Shrink without undo or takeout emits nothing and keeps the old throws."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(1), t(2)]))

    assert rec.reconcile(snap([t(1)])) == []
    assert rec.previous_names == ["S1", "S2"]
    assert rec.ambiguous_snapshots == 1


def test_flickering_dart_not_added_twice():
    """A dart that drops out of one update and comes back is counted once."""
    rec = FeedReconciler()
    events = []
    for throws in ([t(20)], [t(20), t(5)], [t(20)], [t(20), t(5)], [t(20), t(5), t(20, 3)]):
        events.extend(rec.reconcile(snap(throws)))

    assert events == [
        ThrowAdded(t(20), 0),
        ThrowAdded(t(5), 1),
        ThrowAdded(t(20, 3), 2),
    ]


def test_raw_dict_snapshot():
    """Bridge JSON dicts are accepted directly."""
    rec = FeedReconciler()
    events = rec.reconcile({
        "connected": True,
        "running": True,
        "status": "Throw",
        "event": "Throw detected",
        "numThrows": 1,
        "throws": [{"segment": {"name": "T20", "number": 20, "bed": "Triple", "multiplier": 3}}],
    })

    assert len(events) == 1
    assert events[0].throw.segment == Numbered(20, 3)
    assert events[0].index == 0


def test_reset_forgets_memory():
    """After reset the same snapshot is new again."""
    rec = FeedReconciler()
    s = snap([t(3)])
    rec.reconcile(s)

    rec.reset()
    assert rec.previous_names == []
    assert rec.reconcile(s) == [ThrowAdded(t(3), 0)]


def test_stats():
    """Test statistics."""
    rec = FeedReconciler()
    rec.reconcile(snap([t(3)]))
    rec.reconcile(snap([t(3)]))

    stats = rec.get_stats()
    assert stats["snapshots_seen"] == 2
    assert stats["previous_throws"] == ["S3"]
    assert stats["turn_open"]
