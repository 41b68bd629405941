"""
SM-2 style spaced-repetition tracker for flashcards.

Per card, the tracker keeps correct/incorrect counts, the current review
interval and an ease factor:

- Correct: the first success graduates the card from 1 to 6 days, later
  successes multiply the interval by the ease factor; ease grows by 0.1.
- Incorrect: the interval resets to 1 day and ease drops by 0.2, never
  below 1.3.

The next review is always computed from the moment of the response, so a
missed review does not push later reviews further out.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from typing import TYPE_CHECKING, Protocol, TypeVar

from loguru import logger

from studyplan.models import FlashcardReviewState
from studyplan.planning.calendar import add_days, round_half_up
from studyplan.review.similarity import order_by_similarity

if TYPE_CHECKING:
    from studyplan.delivery.state_store import KeyValueStore


class HasId(Protocol):
    id: str


C = TypeVar("C", bound=HasId)

HISTORY_KEY = "flashcardHistory"


@dataclass
class SM2Config:
    """Configuration for the SM-2 update."""

    initial_ease_factor: float = 2.5
    minimum_ease_factor: float = 1.3
    first_interval: int = 1  # Days after a lapse
    graduation_interval: int = 6  # Days after the first success
    ease_bonus: float = 0.1
    ease_penalty: float = 0.2

    @classmethod
    def from_settings(cls, settings) -> SM2Config:
        return cls(
            initial_ease_factor=settings.initial_ease_factor,
            minimum_ease_factor=settings.minimum_ease_factor,
            graduation_interval=settings.graduation_interval_days,
            ease_bonus=settings.ease_bonus,
            ease_penalty=settings.ease_penalty,
        )


class SpacedRepetitionTracker:
    """
    Tracks review state for a set of flashcards.

    Cards are referenced by id only. A card without recorded responses has
    no state and is always due. All mutations and snapshots are serialized
    by an instance lock.
    """

    def __init__(
        self,
        config: SM2Config | None = None,
        states: dict[str, FlashcardReviewState] | None = None,
    ):
        """
        Initialize the tracker.

        Args:
            config: SM-2 constants (uses defaults if None)
            states: Previously recorded card states keyed by card id
        """
        self.config = config or SM2Config()
        self._states: dict[str, FlashcardReviewState] = dict(states or {})
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, card_id: str) -> bool:
        return card_id in self._states

    def get_state(self, card_id: str) -> FlashcardReviewState | None:
        """Return a copy of a card's state, or None if never reviewed."""
        with self._lock:
            state = self._states.get(card_id)
            return replace(state) if state else None

    def record_response(
        self,
        card_id: str,
        is_correct: bool,
        now: datetime | None = None,
    ) -> FlashcardReviewState:
        """
        Record a response and reschedule the card.

        Args:
            card_id: The reviewed card
            is_correct: Whether the card was recalled correctly
            now: Moment of the response (wall clock if None)

        Returns:
            Copy of the updated state
        """
        now = now or datetime.now()
        cfg = self.config

        with self._lock:
            state = self._states.get(card_id)
            if state is None:
                state = FlashcardReviewState(
                    card_id=card_id,
                    interval=cfg.first_interval,
                    ease_factor=cfg.initial_ease_factor,
                )

            if is_correct:
                state.correct += 1
                if state.interval == cfg.first_interval:
                    state.interval = cfg.graduation_interval
                else:
                    state.interval = max(
                        cfg.first_interval, round_half_up(state.interval * state.ease_factor)
                    )
                state.ease_factor += cfg.ease_bonus
            else:
                state.incorrect += 1
                state.interval = cfg.first_interval
                state.ease_factor = max(
                    cfg.minimum_ease_factor, state.ease_factor - cfg.ease_penalty
                )

            state.next_review = add_days(now, state.interval)
            self._states[card_id] = state

            logger.debug(
                f"Recorded {'correct' if is_correct else 'incorrect'} response for {card_id}: "
                f"interval={state.interval}d, ease={state.ease_factor:.2f}, "
                f"next_review={state.next_review.isoformat()}"
            )

            return replace(state)

    def is_due(self, card_id: str, now: datetime | None = None) -> bool:
        now = now or datetime.now()
        with self._lock:
            state = self._states.get(card_id)
            return state is None or state.is_due(now)

    def get_due_flashcards(
        self,
        cards: Sequence[C],
        now: datetime | None = None,
        embeddings: Sequence[Sequence[float]] | None = None,
    ) -> list[C]:
        """
        Select the cards due for review.

        Args:
            cards: Candidate cards (anything with an `id`)
            now: Reference moment (wall clock if None)
            embeddings: Optional per-card embeddings; when given, the due
                cards are chained by content similarity

        Returns:
            Due cards, in input order unless embeddings are given
        """
        now = now or datetime.now()

        with self._lock:
            due_indices = [
                index
                for index, card in enumerate(cards)
                if card.id not in self._states or self._states[card.id].is_due(now)
            ]

        due = [cards[index] for index in due_indices]

        if embeddings is not None:
            if len(embeddings) != len(cards):
                logger.warning(
                    f"Got {len(embeddings)} embeddings for {len(cards)} cards; "
                    "skipping similarity ordering"
                )
                return due
            due = order_by_similarity(due, [embeddings[index] for index in due_indices])

        return due

    def get_difficulty(self, card_id: str) -> float:
        """
        Share of incorrect responses for a card, 0.5 when unknown.
        """
        with self._lock:
            state = self._states.get(card_id)
            if state is None or state.total_responses == 0:
                return 0.5
            return 1 - state.correct / state.total_responses

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_snapshot(self) -> dict[str, dict]:
        with self._lock:
            return {card_id: state.to_dict() for card_id, state in self._states.items()}

    @classmethod
    def from_snapshot(
        cls,
        snapshot: dict[str, dict] | list | None,
        config: SM2Config | None = None,
    ) -> SpacedRepetitionTracker:
        """
        Rebuild a tracker from a stored history blob.

        Accepts a {card_id: state} mapping or a list of [card_id, state]
        pairs. Anything else starts an empty history.
        """
        if isinstance(snapshot, list):
            pairs = []
            for item in snapshot:
                if isinstance(item, (list, tuple)) and len(item) == 2:
                    pairs.append((item[0], item[1]))
                else:
                    logger.warning(f"Skipping malformed review history entry: {item!r}")
        elif isinstance(snapshot, dict):
            pairs = list(snapshot.items())
        else:
            if snapshot is not None:
                logger.warning(
                    f"Review history has unexpected type {type(snapshot).__name__}; starting empty"
                )
            pairs = []

        states: dict[str, FlashcardReviewState] = {}
        for card_id, data in pairs:
            try:
                states[card_id] = FlashcardReviewState.from_dict(card_id, data)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed review state for {card_id}: {e}")
        return cls(config=config, states=states)

    def save(self, store: KeyValueStore, key: str = HISTORY_KEY) -> None:
        store.save(key, self.to_snapshot())

    @classmethod
    def load(
        cls,
        store: KeyValueStore,
        config: SM2Config | None = None,
        key: str = HISTORY_KEY,
    ) -> SpacedRepetitionTracker:
        tracker = cls.from_snapshot(store.load(key), config=config)
        logger.debug(f"Loaded review state for {len(tracker)} cards")
        return tracker
