"""Answer normalization and per-letter feedback for guesses."""
import re
from collections import Counter
from typing import List

from echotutor.models import LetterState
from echotutor.services.errors import InvalidInput

_WHITESPACE = re.compile(r"\s+")


def normalize_answer(raw: str) -> str:
    """
    Canonicalize an answer or guess: drop all whitespace, uppercase the rest.

    Non-letter characters are kept as they are.
    """
    return _WHITESPACE.sub("", raw).upper()


def evaluate_guess(target: str, guess: str) -> List[LetterState]:
    """
    Score a canonical guess against a canonical target.

    Exact matches are credited first, then misplaced letters from whatever
    count of each letter is left, so a letter appearing k times in the
    target earns at most k correct/present tiles.

    Args:
        target: Normalized answer
        guess: Normalized guess of the same length

    Returns:
        One LetterState per position
    """
    if len(target) != len(guess):
        raise InvalidInput(
            f"Guess length {len(guess)} does not match answer length {len(target)}"
        )

    remaining = Counter(target)
    tiles = [LetterState.absent] * len(guess)

    # First pass: exact positions
    for i, letter in enumerate(guess):
        if letter == target[i]:
            tiles[i] = LetterState.correct
            remaining[letter] -= 1

    # Second pass: right letter, wrong spot
    for i, letter in enumerate(guess):
        if tiles[i] == LetterState.correct:
            continue
        if remaining[letter] > 0:
            tiles[i] = LetterState.present
            remaining[letter] -= 1

    return tiles
