import math
from datetime import datetime, timedelta
from typing import Optional

from echotutor.services.errors import InvalidInput

# Ratings offered after revealing a flashcard
QUALITY_AGAIN = 1
QUALITY_HARD = 2
QUALITY_GOOD = 3
QUALITY_EASY = 4
VALID_QUALITIES = (QUALITY_AGAIN, QUALITY_HARD, QUALITY_GOOD, QUALITY_EASY)

PASSING_QUALITY = 3
INITIAL_EASE_FACTOR = 2.5
MIN_EASE_FACTOR = 1.3
INITIAL_INTERVAL_DAYS = 1


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def schedule(quality: int, prior: dict, now: Optional[datetime] = None) -> dict:
    """
    Compute the next review state using a restricted SM-2 variant.

    Quality 3 (Good) and 4 (Easy) pass and grow the interval: 1 day, then
    6 days, then the previous interval times the previous ease factor.
    Quality 1 (Again) and 2 (Hard) fail and reset to a 1 day interval with
    zero repetitions. The ease factor is updated with the SM-2 formula in
    every case and never drops below 1.3.

    Args:
        quality: Learner rating, one of 1-4
        prior: Current "interval_days", "ease_factor" and "repetitions"
        now: Current datetime

    Returns:
        dict with interval_days, ease_factor, repetitions and next_review
    """
    if isinstance(quality, bool) or not isinstance(quality, int) or quality not in VALID_QUALITIES:
        raise InvalidInput(f"Quality must be one of {VALID_QUALITIES}, got {quality!r}")
    if now is None:
        now = datetime.utcnow()

    interval_days = prior["interval_days"]
    ease_factor = prior["ease_factor"]
    repetitions = prior["repetitions"]

    if quality >= PASSING_QUALITY:
        if repetitions == 0:
            new_interval = 1
        elif repetitions == 1:
            new_interval = 6
        else:
            new_interval = _round_half_up(interval_days * ease_factor)
        new_repetitions = repetitions + 1
    else:
        new_repetitions = 0
        new_interval = 1

    new_ease = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    if new_ease < MIN_EASE_FACTOR:
        new_ease = MIN_EASE_FACTOR

    return {
        "interval_days": new_interval,
        "ease_factor": new_ease,
        "repetitions": new_repetitions,
        "next_review": now + timedelta(days=new_interval),
    }
