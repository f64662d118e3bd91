from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

from .models import (
    GroundItem, Hostile, PlayerView,
    ground_item_from_wire, hostile_from_wire, player_from_wire,
)


def _frozen(d: dict) -> Mapping:
    return MappingProxyType(dict(d))


@dataclass(frozen=True)
class WorldSnapshot:
    seq: Optional[float] = None
    players: Mapping[str, PlayerView] = field(default_factory=lambda: _frozen({}))
    hostiles: Mapping[str, Hostile] = field(default_factory=lambda: _frozen({}))
    ground_items: Mapping[str, GroundItem] = field(default_factory=lambda: _frozen({}))

    @classmethod
    def build(cls, seq, players: dict, hostiles: dict, ground_items: dict) -> "WorldSnapshot":
        return cls(seq=seq, players=_frozen(players), hostiles=_frozen(hostiles), ground_items=_frozen(ground_items))

    @classmethod
    def from_message(cls, msg: dict, seq=None) -> "WorldSnapshot":
        players = {}
        for rec in _records(msg.get("players")):
            p = player_from_wire(rec)
            if p is not None:
                players[p.id] = p

        hostiles = {}
        raw_hostiles = msg.get("enemies")
        if raw_hostiles is None:
            raw_hostiles = msg.get("mobs")
        for rec in _records(raw_hostiles):
            h = hostile_from_wire(rec)
            if h is not None:
                hostiles[h.id] = h

        ground = {}
        for rec in _records(msg.get("groundItems")):
            g = ground_item_from_wire(rec)
            if g is not None:
                ground[g.id] = g

        return cls.build(seq, players, hostiles, ground)


def _records(raw):
    # lists of records, or id -> record mappings
    if isinstance(raw, dict):
        out = []
        for k, v in raw.items():
            if isinstance(v, dict):
                rec = dict(v)
                rec.setdefault("id", k)
                out.append(rec)
        return out
    if isinstance(raw, (list, tuple)):
        return [r for r in raw if isinstance(r, dict)]
    return []


class WorldCache:
    """Holds the latest authoritative snapshot.

    ``current`` is swapped as a single reference, so anything that grabbed it
    keeps a consistent view of all three maps.
    """

    def __init__(self):
        self.current = WorldSnapshot()

    def replace(self, snapshot: WorldSnapshot):
        self.current = snapshot

    def local_player(self, player_id: Optional[str]) -> Optional[PlayerView]:
        if player_id is None:
            return None
        return self.current.players.get(player_id)

    def remove_ground_item(self, item_id: str) -> bool:
        snap = self.current
        if item_id not in snap.ground_items:
            return False
        ground = dict(snap.ground_items)
        del ground[item_id]
        self.current = replace(snap, ground_items=_frozen(ground))
        return True
