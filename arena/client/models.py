from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from . import config as cfg

HOTBAR = "hotbar"
INVENTORY = "inventory"
CONTAINERS = (HOTBAR, INVENTORY)

Color = Tuple[int, int, int]

# Petal keys the client models; anything else rides along in Petal.extra.
PETAL_KEYS = ("id", "type", "tier", "hp", "maxHp", "broken", "angle")


@dataclass
class Petal:
    id: str
    type: str = "basic"
    tier: int = 1
    hp: float = 10.0
    max_hp: float = 10.0
    color: Optional[Color] = None
    broken_flag: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    # derived, client-only
    angle: float = 0.0

    def __post_init__(self):
        if self.color is None:
            self.color = petal_color(self.type)

    @property
    def broken(self) -> bool:
        return self.broken_flag or self.hp <= 0

    def to_wire(self) -> dict:
        rec = dict(self.extra)
        rec.update({
            "id": self.id,
            "type": self.type,
            "tier": self.tier,
            "hp": self.hp,
            "maxHp": self.max_hp,
            "broken": self.broken,
        })
        return rec


@dataclass(frozen=True)
class PlayerView:
    id: str
    x: float
    y: float
    hp: float = 100.0
    max_hp: float = 100.0
    name: str = "Anonymous"
    hotbar: tuple = ()     # raw wire records, turned into Petals by the store
    inventory: tuple = ()
    dead: bool = False
    level: int = 1
    xp: int = 0
    coins: int = 0
    petal_slots: int = cfg.HOTBAR_SIZE
    orbit_radius: float = cfg.DEFAULT_ORBIT_RADIUS
    orbit_speed: float = cfg.DEFAULT_ORBIT_SPEED
    retracting: bool = False


@dataclass(frozen=True)
class Hostile:
    id: str
    x: float
    y: float
    type: str = "wanderer"
    size: float = 20.0
    hp: float = 50.0
    max_hp: float = 50.0
    dead: bool = False


@dataclass(frozen=True)
class GroundItem:
    id: str
    x: float
    y: float
    petal: Petal = field(default_factory=lambda: Petal(id=""))


# =========================
# Wire -> model
# =========================
def _num(rec: dict, key: str, default: float) -> float:
    v = rec.get(key)
    if v is None:
        return float(default)
    try:
        return float(v)
    except (TypeError, ValueError):
        return float(default)

def _int(rec: dict, key: str, default: int) -> int:
    return int(_num(rec, key, default))

def _id(rec: dict) -> Optional[str]:
    v = rec.get("id")
    if v is None:
        return None
    return str(v)

def petal_color(petal_type: str) -> Color:
    return cfg.PETAL_COLORS.get(petal_type, cfg.DEFAULT_PETAL_COLOR)

def petal_from_wire(rec: Optional[dict], fallback_id: str) -> Optional[Petal]:
    """Build a Petal from a server record, or None for an empty slot.

    Records without an id get ``fallback_id`` (``"<container>:<slot>"``) so
    that ingesting the same data twice produces the same ids.
    """
    if not isinstance(rec, dict):
        return None

    ptype = str(rec.get("type") or "basic")
    broken = bool(rec.get("broken", False))
    max_hp = _num(rec, "maxHp", 10.0)
    hp = _num(rec, "hp", 0.0 if broken else max_hp)

    color = rec.get("color")
    if isinstance(color, (list, tuple)) and len(color) == 3:
        color = tuple(int(c) for c in color)
    else:
        color = petal_color(ptype)

    return Petal(
        id=_id(rec) or fallback_id,
        type=ptype,
        tier=max(1, _int(rec, "tier", 1)),
        hp=hp,
        max_hp=max_hp,
        color=color,
        broken_flag=broken,
        angle=_num(rec, "angle", 0.0),
        extra={k: v for k, v in rec.items() if k not in PETAL_KEYS},
    )

def petals_from_wire(records, container: str) -> List[Optional[Petal]]:
    if not isinstance(records, (list, tuple)):
        return []
    return [petal_from_wire(r, f"{container}:{i}") for i, r in enumerate(records)]

def player_from_wire(rec: dict) -> Optional[PlayerView]:
    pid = _id(rec)
    if pid is None:
        return None

    hotbar = rec.get("hotbar")
    if hotbar is None:
        hotbar = rec.get("petals")

    max_hp = _num(rec, "maxHp", 100.0)
    return PlayerView(
        id=pid,
        x=_num(rec, "x", 0.0),
        y=_num(rec, "y", 0.0),
        hp=_num(rec, "hp", max_hp),
        max_hp=max_hp,
        name=str(rec.get("name") or "Anonymous"),
        hotbar=tuple(hotbar or ()),
        inventory=tuple(rec.get("inventory") or ()),
        dead=bool(rec.get("dead", False)),
        level=_int(rec, "level", 1),
        xp=_int(rec, "xp", 0),
        coins=_int(rec, "coins", 0),
        petal_slots=_int(rec, "petalSlots", cfg.HOTBAR_SIZE),
        orbit_radius=_num(rec, "orbitRadius", cfg.DEFAULT_ORBIT_RADIUS),
        orbit_speed=_num(rec, "orbitSpeed", cfg.DEFAULT_ORBIT_SPEED),
        retracting=bool(rec.get("retracting", False)),
    )

def hostile_from_wire(rec: dict) -> Optional[Hostile]:
    hid = _id(rec)
    if hid is None:
        return None
    max_hp = _num(rec, "maxHp", 50.0)
    return Hostile(
        id=hid,
        x=_num(rec, "x", 0.0),
        y=_num(rec, "y", 0.0),
        type=str(rec.get("type") or "wanderer"),
        size=_num(rec, "size", 20.0),
        hp=_num(rec, "hp", max_hp),
        max_hp=max_hp,
        dead=bool(rec.get("dead", False)),
    )

def ground_item_from_wire(rec: dict) -> Optional[GroundItem]:
    gid = _id(rec)
    if gid is None:
        return None

    payload = rec.get("petal")
    if payload is None:
        payload = rec.get("item")
    if payload is None:
        payload = {k: v for k, v in rec.items() if k not in ("id", "x", "y")}

    petal = petal_from_wire(payload, f"ground:{gid}")
    if petal is None:
        return None
    return GroundItem(id=gid, x=_num(rec, "x", 0.0), y=_num(rec, "y", 0.0), petal=petal)
