"""
Similarity ordering for review queues.

Reorders due cards so that cards with similar content follow each other,
which reduces topic switching during a review session. Embeddings come from
the caller; this module only does the vector math.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

import numpy as np
from loguru import logger

T = TypeVar("T")


def cosine_similarity(emb1: np.ndarray, emb2: np.ndarray) -> float | None:
    """
    Cosine similarity between two embeddings.

    Returns None when either vector has zero magnitude.
    """
    norm1 = np.linalg.norm(emb1)
    norm2 = np.linalg.norm(emb2)

    if norm1 == 0 or norm2 == 0:
        return None

    return float(np.dot(emb1, emb2) / (norm1 * norm2))


def order_by_similarity(
    cards: Sequence[T],
    embeddings: Sequence[Sequence[float]],
) -> list[T]:
    """
    Order cards as a greedy nearest-neighbour chain.

    Starts with the first card, then repeatedly appends the remaining card
    most similar to the last one added. Candidates without a similarity
    signal are skipped; if none has a signal, the next card in input order
    is taken.

    Args:
        cards: Cards in their current order
        embeddings: One embedding per card, same order

    Returns:
        The reordered cards (input order if embeddings don't line up or
        differ in dimension)
    """
    if len(cards) < 2:
        return list(cards)

    if len(embeddings) != len(cards):
        logger.warning(
            f"Got {len(embeddings)} embeddings for {len(cards)} cards; keeping input order"
        )
        return list(cards)

    vectors = [np.asarray(embedding, dtype=np.float64) for embedding in embeddings]
    if any(vector.shape != vectors[0].shape for vector in vectors):
        logger.warning("Embeddings have different dimensions; keeping input order")
        return list(cards)

    ordered = [0]
    remaining = list(range(1, len(cards)))

    while remaining:
        last = vectors[ordered[-1]]
        best_index = None
        best_similarity = -1.0

        for index in remaining:
            similarity = cosine_similarity(last, vectors[index])
            if similarity is None:
                continue
            if best_index is None or similarity > best_similarity:
                best_index = index
                best_similarity = similarity

        if best_index is None:
            best_index = remaining[0]

        ordered.append(best_index)
        remaining.remove(best_index)

    return [cards[index] for index in ordered]
