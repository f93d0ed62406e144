"""
Расчет серии поездок по дням (streak)

Все даты сравниваются по полуночи UTC через общий примитив utc_day_diff,
чтобы хранимая серия и серия для отображения одинаково понимали "пропуск".
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from cyclehub.timeutils import utcnow, as_utc, utc_day_diff


@dataclass(frozen=True)
class StreakState:
    current_streak: int
    longest_streak: int
    last_ride_date: datetime


def update_streak(last_ride_date: Optional[datetime], current_streak: int, longest_streak: int,
                  now: Optional[datetime] = None) -> StreakState:
    """
    Новая серия после завершенной поездки.

    - первая поездка: серия 1
    - тот же день: без изменений, last_ride_date не сдвигается
    - следующий день: +1
    - пропуск больше дня: серия 1, longest_streak сохраняется
    """
    now = as_utc(now) if now else utcnow()

    if last_ride_date is None:
        return StreakState(1, max(longest_streak, 1), now)

    last = as_utc(last_ride_date)
    diff_days = utc_day_diff(last, now)

    if diff_days == 0:
        return StreakState(current_streak, longest_streak, last)

    if diff_days == 1:
        new_streak = current_streak + 1
        return StreakState(new_streak, max(longest_streak, new_streak), now)

    return StreakState(1, max(longest_streak, 1), now)


def display_streak(last_ride_date: Optional[datetime], current_streak: int,
                   now: Optional[datetime] = None) -> int:
    """Серия для показа: 0, если с последней поездки прошло больше дня. Хранимое значение не меняется"""
    if last_ride_date is None:
        return current_streak or 0
    now = as_utc(now) if now else utcnow()
    if utc_day_diff(last_ride_date, now) > 1:
        return 0
    return current_streak or 0
