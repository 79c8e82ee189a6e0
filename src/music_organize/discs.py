from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable

from .models import TrackRecord


@dataclass
class AlbumDiscState:
    discs: set[int] = field(default_factory=set)
    explicit_multi_disc: bool = False

    def observe(self, record: TrackRecord) -> None:
        self.discs.add(effective_disc(record))
        if record.disc_count > 1:
            self.explicit_multi_disc = True

    @property
    def is_multi_disc(self) -> bool:
        return len(self.discs) > 1 or self.explicit_multi_disc


def effective_disc(record: TrackRecord) -> int:
    return record.disc_number if record.disc_number > 0 else 1


def classify(records: Iterable[TrackRecord]) -> frozenset[str]:
    """Return the album keys that span more than one disc.

    An album is multi-disc when its tracks show two or more distinct disc
    numbers, or when any track declares a disc count above one. The second
    signal keeps a partially ripped set (only disc 1 present) in its
    ``Disc 01`` folder. The result does not depend on record order.
    """
    albums: dict[str, AlbumDiscState] = defaultdict(AlbumDiscState)
    for record in records:
        albums[record.album_key].observe(record)

    return frozenset(key for key, state in albums.items() if state.is_multi_disc)
