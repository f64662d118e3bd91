from typing import Dict, Iterable, List, Optional, Tuple

from .models import HOTBAR, INVENTORY, Petal, petal_from_wire


class EquipmentStore:
    """The local player's hotbar and inventory.

    Both containers are fixed-length slot lists; an index is a stable address
    and moving a petal never renumbers other slots. A petal id appears in at
    most one slot across both containers.

    Every local edit sets ``dirty``; the sync layer sends an update while it
    is set. Authoritative data from the server replaces everything
    (server-wins) and clears it.
    """

    def __init__(self, hotbar_size: int = 5, inventory_size: int = 10):
        self._slots: Dict[str, List[Optional[Petal]]] = {
            HOTBAR: [None] * hotbar_size,
            INVENTORY: [None] * inventory_size,
        }
        self.dirty = False

    # =========================
    # Reads
    # =========================
    @property
    def hotbar(self) -> Tuple[Optional[Petal], ...]:
        return tuple(self._slots[HOTBAR])

    @property
    def inventory(self) -> Tuple[Optional[Petal], ...]:
        return tuple(self._slots[INVENTORY])

    def capacity(self, container: str) -> int:
        return len(self._slots[container])

    def get(self, container: str, slot: int) -> Optional[Petal]:
        slots = self._slots.get(container)
        if slots is None or not 0 <= slot < len(slots):
            return None
        return slots[slot]

    def equipped(self) -> List[Petal]:
        return [p for p in self._slots[HOTBAR] if p is not None]

    def item_count(self) -> int:
        return sum(1 for slots in self._slots.values() for p in slots if p is not None)

    def free_inventory_slots(self) -> int:
        return sum(1 for p in self._slots[INVENTORY] if p is None)

    def holds(self, petal_id: str) -> bool:
        return any(p is not None and p.id == petal_id for slots in self._slots.values() for p in slots)

    def serialize(self) -> Tuple[list, list]:
        return (
            [p.to_wire() if p else None for p in self._slots[HOTBAR]],
            [p.to_wire() if p else None for p in self._slots[INVENTORY]],
        )

    def mark_clean(self):
        self.dirty = False

    # =========================
    # Local edits
    # =========================
    def move_item(self, from_container: str, from_slot: int, to_container: str, to_slot: int) -> bool:
        src = self._slots.get(from_container)
        dst = self._slots.get(to_container)
        if src is None or dst is None:
            return False
        if not 0 <= from_slot < len(src) or not 0 <= to_slot < len(dst):
            return False
        if dst[to_slot] is not None:
            return False
        petal = src[from_slot]
        if petal is None:
            return False

        src[from_slot] = None
        dst[to_slot] = petal
        self.dirty = True
        return True

    def pick_up(self, petal: Petal) -> Optional[int]:
        if self.holds(petal.id):
            return None
        inv = self._slots[INVENTORY]
        for i, slot in enumerate(inv):
            if slot is None:
                inv[i] = petal
                self.dirty = True
                return i
        return None

    # =========================
    # Server-wins
    # =========================
    def apply_authoritative(self, server_hotbar: Iterable, server_inventory: Iterable):
        old_angles = {p.id: p.angle for slots in self._slots.values() for p in slots if p is not None}
        seen = set()

        for container, records in ((HOTBAR, server_hotbar), (INVENTORY, server_inventory)):
            capacity = len(self._slots[container])
            records = list(records or ())
            if len(records) > capacity:
                print(f"[sync] server {container} has {len(records)} slots, keeping {capacity}")
                records = records[:capacity]

            new_slots: List[Optional[Petal]] = [None] * capacity
            for i, rec in enumerate(records):
                petal = rec if isinstance(rec, Petal) else petal_from_wire(rec, f"{container}:{i}")
                if petal is None:
                    continue
                if petal.id in seen:
                    print(f"[sync] dropping duplicate petal id={petal.id} in {container}[{i}]")
                    continue
                seen.add(petal.id)
                if petal.id in old_angles:
                    petal.angle = old_angles[petal.id]
                new_slots[i] = petal
            self._slots[container] = new_slots

        self.dirty = False
