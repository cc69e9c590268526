"""Random pick-and-remove over a review list."""
import random
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence

# (length) -> index in [0, length)
IndexPicker = Callable[[int], int]

_system_random = random.SystemRandom()


def random_index(length: int) -> int:
    """Uniform index in [0, length). Not reproducible."""
    return _system_random.randrange(length)


@dataclass(frozen=True)
class SelectionResult:
    chosen: Any
    residual: List[Any]


def select_and_remove(reviews: Sequence[Any], pick_index: IndexPicker = random_index) -> SelectionResult:
    """
    Pick one review at random and return it with the remaining reviews.

    The input is not mutated; residual keeps the relative order of the other
    elements. Callers must not pass an empty list.
    """
    if not reviews:
        raise ValueError("select_and_remove requires a non-empty list")
    index = pick_index(len(reviews))
    if not 0 <= index < len(reviews):
        raise ValueError(f"Index picker returned {index} for a list of {len(reviews)}")
    residual = list(reviews[:index]) + list(reviews[index + 1:])
    return SelectionResult(chosen=reviews[index], residual=residual)
