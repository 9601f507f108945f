from fractions import Fraction
from typing import List, Mapping, Union

from .types import Attempts, Outcome, PersonScore, ScoreRecordTuple, ScoreRenderData


# Multiplier applied for each missed day and each unredeemed fail
PENALTY_BASE = 3


def compute_score(record: Mapping[int, Outcome]) -> PersonScore:
    """Fold a sparse day record into a cumulative score.

    Walks every day from the first to the last played day:

    - a solved day adds ``3 ** uncounted_fails * attempts`` and closes the
      open fail streak
    - a failed day only extends the open fail streak; its penalty is paid
      by the next solved day
    - a day with no entry (a gap) multiplies everything accumulated so far
      by 3 and leaves the fail streak open

    A fail streak still open at the last played day adds nothing to the
    total and is reported as ``uncounted_fails``.
    """
    if not record:
        return PersonScore(total_score=0, days_played=0, uncounted_fails=0)

    min_day, max_day = min(record), max(record)
    total = 0
    uncounted_fails = 0
    for day in range(min_day, max_day + 1):
        outcome = record.get(day)
        if outcome is None:
            total *= PENALTY_BASE
        elif isinstance(outcome, Attempts):
            total += PENALTY_BASE ** uncounted_fails * outcome.count
            uncounted_fails = 0
        else:
            uncounted_fails += 1

    return PersonScore(total_score=total, days_played=len(record), uncounted_fails=uncounted_fails)


def average_per_day(total: int, counted_days: int) -> Union[float, int]:
    """Total over counted days, rounded to two decimals.

    Long gaps push totals past the float range. Those averages come back as
    an exact int; cents carry no information at that size.
    """
    exact = Fraction(total, max(1, counted_days))
    try:
        return float(round(exact, 2))
    except OverflowError:
        return round(exact)


def to_render_data(score: PersonScore) -> ScoreRenderData:
    counted_days = score.days_played - score.uncounted_fails
    return ScoreRenderData(
        total_score=score.total_score,
        days_played=score.days_played,
        uncounted_fails=score.uncounted_fails,
        score_per_day=average_per_day(score.total_score, counted_days),
    )


def record_array(record: Mapping[int, Outcome]) -> List[ScoreRecordTuple]:
    return sorted(record.items(), key=lambda item: item[0])
