"""
Tests for the turn clock, the manual scheduler and bot takeover.
"""

from tresillo_engine.clock import ManualScheduler, ScheduledCall, TurnClock


class StubbornScheduler:
    """Keeps every callback, even cancelled ones, so they can be fired by hand."""

    def __init__(self):
        self.calls = []

    def call_later(self, delay, callback):
        self.calls.append(callback)
        return ScheduledCall(callback)


def test_manual_scheduler_runs_in_time_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(2.0, lambda: fired.append('b'))
    scheduler.call_later(1.0, lambda: fired.append('a'))
    cancelled = scheduler.call_later(1.5, lambda: fired.append('x'))
    cancelled.cancel()

    assert scheduler.pending == 2
    assert scheduler.advance(1.0) == 1
    assert fired == ['a']
    assert scheduler.run_pending() == 1
    assert fired == ['a', 'b']
    assert not scheduler.run_next()


def test_arming_supersedes_previous_timer():
    scheduler = ManualScheduler()
    clock = TurnClock(scheduler)
    fired = []
    clock.arm(1.0, lambda: fired.append('old'))
    clock.arm(5.0, lambda: fired.append('new'))
    assert clock.pending
    scheduler.run_pending()
    assert fired == ['new']
    assert not clock.pending


def test_superseded_callback_never_fires_even_if_queued():
    scheduler = StubbornScheduler()
    clock = TurnClock(scheduler)
    fired = []
    clock.arm(1.0, lambda: fired.append('old'))
    clock.arm(1.0, lambda: fired.append('new'))
    for callback in scheduler.calls:
        callback()
    assert fired == ['new']


def test_cancel_drops_pending_timer():
    scheduler = StubbornScheduler()
    clock = TurnClock(scheduler)
    fired = []
    clock.arm(1.0, lambda: fired.append('x'))
    clock.cancel()
    scheduler.calls[0]()
    assert fired == []
    assert clock.delay is None


def test_bot_acts_after_bot_delay(tresillo):
    room, human, scheduler = tresillo
    rules = room.rules
    assert room.state.turn == 'left'
    assert rules.bot_delay_min <= room.clock.delay <= rules.bot_delay_max

    seq = room.state.seq
    assert scheduler.run_next()
    auction = room.state.auction
    assert 'left' in auction.passed or auction.current_bidder == 'left'
    assert room.state.seq == seq + 1


def test_human_gets_turn_timeout(tresillo):
    room, human, scheduler = tresillo
    scheduler.run_next()
    scheduler.run_next()
    assert room.state.turn == 'you'
    assert room.clock.delay == room.rules.turn_timeout

    # Nothing happens before the timeout runs out
    seq = room.state.seq
    assert scheduler.advance(room.rules.turn_timeout - 1) == 0
    assert room.state.seq == seq

    assert scheduler.advance(1.5) == 1
    assert room.state.seq > seq


def test_displaced_bot_timer_does_not_fire(tresillo, connection_factory):
    room, human, scheduler = tresillo
    assert room.state.turn == 'left'
    newcomer = connection_factory("h2", "Bob")
    room.attach(newcomer)
    room.handle(newcomer, {"type": "JOIN", "mode": "tresillo"})

    assert newcomer.seat == 'left'
    assert room.clock.delay == room.rules.turn_timeout
    seq = room.state.seq
    assert scheduler.advance(room.rules.bot_delay_max + 0.1) == 0
    assert room.state.turn == 'left'
    assert room.state.seq == seq
    assert room.state.auction.passed == []
