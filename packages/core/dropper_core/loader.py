"""Image load requests guarded by a generation counter."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LoadTicket:
    generation: int
    media_type: str


class ImageLoader:
    """Hands out tickets for image loads; only the newest ticket may commit.

    A decode that finishes after a newer load was requested carries a stale
    ticket and is ignored by the caller.
    """

    def __init__(self) -> None:
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self, media_type: str) -> LoadTicket:
        self._generation += 1
        return LoadTicket(generation=self._generation, media_type=media_type)

    def is_current(self, ticket: LoadTicket) -> bool:
        return ticket.generation == self._generation

    def invalidate(self) -> None:
        self._generation += 1
