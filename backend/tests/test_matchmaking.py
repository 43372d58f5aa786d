import pytest

from arena import store
from arena.errors import NotFound


def test_one_sided_challenge_waits(engine, make_user):
    alice, bob = make_user(), make_user()
    result = engine.queue.join(alice, bob)
    assert not result.matched
    assert result.match_id is None
    assert engine.queue.pending_for(alice).desired_opponent_id == bob
    assert engine.queue.pending_for(alice).status == 'waiting'
    assert engine.state.matches == {}


def test_mutual_challenge_pairs(engine, clock, make_user):
    alice, bob = make_user(), make_user()
    engine.queue.join(alice, bob)
    result = engine.queue.join(bob, alice)
    assert result.matched
    assert engine.queue.pending_for(alice) is None
    assert engine.queue.pending_for(bob) is None

    match = engine.registry.get(result.match_id)
    assert match.is_active
    assert match.players == (bob, alice)
    assert match.deadline == clock.now + 120

    record = store.get_match(result.match_id)
    assert record.state == 'active'
    assert record.start_time == int(clock.now * 1000)


def test_rejoin_replaces_pending_entry(engine, make_user):
    alice, bob, cara = make_user(), make_user(), make_user()
    engine.queue.join(alice, bob)
    engine.queue.join(alice, cara)
    assert engine.queue.pending_for(alice).desired_opponent_id == cara
    # alice no longer wants bob, so bob's challenge only parks
    assert not engine.queue.join(bob, alice).matched
    assert engine.queue.join(cara, alice).matched


def test_repeated_join_is_idempotent(engine, make_user):
    alice, bob = make_user(), make_user()
    engine.queue.join(alice, bob)
    engine.queue.join(alice, bob)
    assert len(engine.state.queue) == 1


def test_cancel_removes_entry(engine, make_user):
    alice, bob = make_user(), make_user()
    engine.queue.join(alice, bob)
    assert engine.queue.cancel(alice) is True
    assert engine.queue.pending_for(alice) is None
    assert not engine.queue.join(bob, alice).matched


def test_cancel_without_entry_is_noop(engine, make_user):
    assert engine.queue.cancel(make_user()) is False


def test_unknown_requester_rejected(engine, make_user):
    with pytest.raises(NotFound):
        engine.queue.join('ARNG-NOBODY00', make_user())


def test_unknown_opponent_is_allowed_to_wait(engine, make_user):
    alice = make_user()
    assert not engine.queue.join(alice, 'ARNG-SOMEONE0').matched


def test_self_challenge_never_pairs(engine, make_user):
    alice = make_user()
    assert not engine.queue.join(alice, alice).matched
    assert not engine.queue.join(alice, alice).matched
    assert engine.state.matches == {}
