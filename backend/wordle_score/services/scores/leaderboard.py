import logging
from typing import List, Optional

from .codec import record_from_payload
from .errors import ValidationError
from .scoring import compute_score, to_render_data
from .types import LeaderboardRow


def build_leaderboard(all_scores: dict, logger: Optional[logging.Logger] = None) -> List[LeaderboardRow]:
    """Rank every user the sync server knows about.

    Lower average per counted day ranks first; ties go to whoever played
    more days, then by name.
    """
    logger = logger or logging.getLogger(__name__)
    rows = []
    for user, entry in (all_scores or {}).items():
        raw = entry.get('record') if isinstance(entry, dict) else None
        try:
            record = record_from_payload(raw)
        except ValidationError:
            logger.warning(f"[leaderboard-skip] user={user!r} has an invalid record")
            continue
        if not record:
            continue
        data = to_render_data(compute_score(record))
        rows.append(LeaderboardRow(
            user=user,
            total_score=data.total_score,
            days_played=data.days_played,
            uncounted_fails=data.uncounted_fails,
            score_per_day=data.score_per_day,
            last_day=max(record),
        ))
    rows.sort(key=lambda r: (r.score_per_day, -r.days_played, r.user))
    return rows
