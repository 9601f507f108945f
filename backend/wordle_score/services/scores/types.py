from dataclasses import dataclass, asdict
from typing import Dict, List, Literal, Optional, Tuple, Union


FAIL_MARKER = 'X'
MIN_ATTEMPTS = 1
MAX_ATTEMPTS = 6


@dataclass(frozen=True)
class Attempts:
    """Solved on the ``count``-th guess (1..6)."""
    count: int

    def __post_init__(self):
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise ValueError(f'attempt count must be an int, got {self.count!r}')
        if not MIN_ATTEMPTS <= self.count <= MAX_ATTEMPTS:
            raise ValueError(f'attempt count must be in [{MIN_ATTEMPTS}, {MAX_ATTEMPTS}], got {self.count}')

    def to_json(self) -> int:
        return self.count

    def __str__(self):
        return str(self.count)


@dataclass(frozen=True)
class Failed:
    """Played but not solved."""

    def to_json(self) -> str:
        return FAIL_MARKER

    def __str__(self):
        return FAIL_MARKER


FAILED = Failed()

Outcome = Union[Attempts, Failed]
ScoreRecord = Dict[int, Outcome]
ScoreRecordTuple = Tuple[int, Outcome]

# Display order used by day controls and distributions
OUTCOMES: List[Outcome] = [Attempts(n) for n in range(MIN_ATTEMPTS, MAX_ATTEMPTS + 1)] + [FAILED]


def outcome_from_json(value) -> Outcome:
    """Convert the wire form (1..6 or 'X') into an Outcome."""
    if value == FAIL_MARKER:
        return FAILED
    return Attempts(value)


@dataclass(frozen=True)
class PersonScore:
    total_score: int = 0
    days_played: int = 0
    uncounted_fails: int = 0

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class ScoreRenderData:
    total_score: int
    days_played: int
    uncounted_fails: int
    score_per_day: Union[float, int]

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class SyncDetails:
    user: str = ''
    password: str = ''

    @property
    def can_sync(self) -> bool:
        return bool(self.user) and bool(self.password)

    def to_public_dict(self):
        # Never echo the password back to clients
        return {'user': self.user, 'has_password': bool(self.password), 'can_sync': self.can_sync}


SyncStatus = Literal['idle', 'loading', 'success', 'failed']
RestoreStatus = Literal['idle', 'comparing', 'success', 'failed']
RestoreOrigin = Literal['clipboard', 'file', 'remote']


@dataclass
class RestoreCandidate:
    record: ScoreRecord
    origin: RestoreOrigin


Theme = Literal['dark', 'light']
THEMES = ('dark', 'light')


@dataclass(frozen=True)
class Settings:
    animated_counts: bool = True
    show_sync_indicators: bool = True
    dev_stuff: bool = False
    theme: str = 'dark'
    shorten_big_numbers: bool = False
    color_scores: bool = True
    glowy_numbers: bool = True
    show_done_checkmark: bool = True

    def to_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class LeaderboardRow:
    user: str
    total_score: int
    days_played: int
    uncounted_fails: int
    score_per_day: Union[float, int]
    last_day: Optional[int] = None

    def to_dict(self):
        return asdict(self)
