"""Edit-distance similarity used to re-rank fuzzy title matches."""
from typing import Optional, Sequence

from ss_tools.models.api_models import Paper

MATCH_SCORE_WEIGHT = 0.5
SIMILARITY_WEIGHT = 0.5


def levenshtein_distance(s1: str, s2: str) -> int:
    """Classic Levenshtein distance over characters (unit costs)."""
    if len(s1) < len(s2):
        s1, s2 = s2, s1

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i]
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current
    return previous[-1]


def normalized_levenshtein(s1: str, s2: str) -> float:
    """Edit distance divided by the longer string's length, in [0, 1]."""
    longest = max(len(s1), len(s2))
    if longest == 0:
        return 0.0
    return levenshtein_distance(s1, s2) / longest


def levenshtein_similarity(s1: str, s2: str) -> float:
    """Map normalized distance d to 1 / (1 + d): 1.0 for identical strings."""
    return 1.0 / (1.0 + normalized_levenshtein(s1, s2))


def combined_score(query: str, paper: Paper) -> float:
    """Equal-weight blend of the remote match score and title similarity."""
    match_score = paper.match_score or 0.0
    similarity = levenshtein_similarity(query, paper.title or "")
    return MATCH_SCORE_WEIGHT * match_score + SIMILARITY_WEIGHT * similarity


def select_best_match(query: str, candidates: Sequence[Paper]) -> Optional[Paper]:
    """
    Pick the candidate with the highest combined score.

    Ties go to the candidate that comes first in remote response order.
    Returns None when there are no candidates.
    """
    best: Optional[Paper] = None
    best_score = float("-inf")
    for paper in candidates:
        score = combined_score(query, paper)
        if score > best_score:
            best, best_score = paper, score
    return best
