"""
Deck Factory - Builds unshuffled decks of paired cards.

For the k-th image (1-based, input order) two cards are emitted with ids
2k-1 and 2k. Ids are fixed before shuffling so a given image list and
shuffle seed always yield the same deck.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from .errors import DeckIntegrityError
from .state import Card


@dataclass(frozen=True)
class ImageRef:
    """
    Abstract image identifier.

    The engine only stores `id`; name and path are for the asset port.
    """
    id: int
    name: str = ""
    path: str = ""


def create_deck(images: Iterable[ImageRef | int]) -> list[Card]:
    """
    Create two face-down cards per image.

    Accepts ImageRef objects or bare integer image ids. No upper bound is
    enforced here; callers validate the pair count first.
    """
    cards: list[Card] = []
    for k, image in enumerate(images, start=1):
        image_id = image.id if isinstance(image, ImageRef) else int(image)
        cards.append(Card(id=2 * k - 1, image_id=image_id))
        cards.append(Card(id=2 * k, image_id=image_id))
    return cards


def create_cards(pair_count: int) -> list[Card]:
    """Deck using image ids 1..pair_count."""
    return create_deck(range(1, pair_count + 1))


def validate_deck(cards: Iterable[Card]) -> None:
    """
    Check the pairing invariants.

    Raises DeckIntegrityError when an image id does not appear exactly
    twice, a card id repeats, or a matched card is face-down.
    """
    cards = list(cards)
    image_counts = Counter(c.image_id for c in cards)
    bad_images = sorted(i for i, n in image_counts.items() if n != 2)
    if bad_images:
        raise DeckIntegrityError(f"Images without exactly two cards: {bad_images}")

    id_counts = Counter(c.id for c in cards)
    duplicate_ids = sorted(i for i, n in id_counts.items() if n > 1)
    if duplicate_ids:
        raise DeckIntegrityError(f"Duplicate card ids: {duplicate_ids}")

    hidden_matches = [c.id for c in cards if c.is_matched and not c.is_revealed]
    if hidden_matches:
        raise DeckIntegrityError(f"Matched cards must be revealed: {hidden_matches}")
