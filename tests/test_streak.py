from datetime import datetime, timezone

from cyclehub.services.streak import update_streak, display_streak


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def test_first_ride_starts_streak():
    now = utc(2024, 5, 10, 8, 0)
    state = update_streak(None, 0, 0, now)
    assert state.current_streak == 1
    assert state.longest_streak == 1
    assert state.last_ride_date == now


def test_same_day_keeps_streak_and_date():
    last = utc(2024, 5, 10, 7, 0)
    state = update_streak(last, 3, 5, utc(2024, 5, 10, 22, 30))
    assert (state.current_streak, state.longest_streak) == (3, 5)
    assert state.last_ride_date == last


def test_next_day_extends_streak_and_longest():
    state = update_streak(utc(2024, 5, 10, 23, 50), 4, 4, utc(2024, 5, 11, 0, 10))
    assert state.current_streak == 5
    assert state.longest_streak == 5


def test_gap_resets_current_but_keeps_longest():
    state = update_streak(utc(2024, 5, 10, 12, 0), 7, 9, utc(2024, 5, 13, 12, 0))
    assert state.current_streak == 1
    assert state.longest_streak == 9


def test_naive_stored_date_is_treated_as_utc():
    # SQLite отдает naive datetime
    state = update_streak(datetime(2024, 5, 10, 12, 0), 2, 2, utc(2024, 5, 11, 1, 0))
    assert state.current_streak == 3


def test_display_streak():
    last = utc(2024, 5, 10, 18, 0)
    assert display_streak(last, 4, utc(2024, 5, 10, 20, 0)) == 4
    assert display_streak(last, 4, utc(2024, 5, 11, 20, 0)) == 4
    assert display_streak(last, 4, utc(2024, 5, 12, 0, 1)) == 0
    assert display_streak(None, 0, utc(2024, 5, 12)) == 0
