import re
from datetime import date
from typing import Optional, Tuple, Union

from .errors import ShareTextError
from .types import Outcome, outcome_from_json


DEFAULT_EPOCH = date(2021, 6, 19)

# "Wordle 1,234 3/6*" -- number may be grouped with commas, dots or spaces
_SHARE_HEADER = re.compile(
    r'Wordle\s+(?P<day>\d{1,3}(?:[,.\s]\d{3})*|\d+)\s+(?P<result>[1-6Xx])/6(?P<hard>\*?)'
)


def parse_epoch(value: Union[str, date, None]) -> date:
    if value is None:
        return DEFAULT_EPOCH
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def current_day_offset(today: Optional[date] = None, epoch: Union[str, date, None] = None) -> int:
    """Days elapsed since puzzle 0, which is also today's puzzle number."""
    today = today or date.today()
    return (today - parse_epoch(epoch)).days


def parse_share_text(text: str) -> Tuple[int, Outcome]:
    """Extract (day offset, outcome) from the game's share text."""
    match = _SHARE_HEADER.search(text or '')
    if not match:
        raise ShareTextError('no Wordle result found in text')
    day = int(re.sub(r'[,.\s]', '', match.group('day')))
    if day < 1:
        raise ShareTextError(f'invalid day {day}')
    result = match.group('result').upper()
    return day, outcome_from_json(result if result == 'X' else int(result))
