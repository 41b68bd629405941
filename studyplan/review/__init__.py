"""
Flashcard review scheduling (SM-2) and review-queue ordering.
"""

from studyplan.review.similarity import cosine_similarity, order_by_similarity
from studyplan.review.tracker import SM2Config, SpacedRepetitionTracker

__all__ = [
    "SM2Config",
    "SpacedRepetitionTracker",
    "cosine_similarity",
    "order_by_similarity",
]
