from typing import Optional, Set, Tuple

from arena.net import protocol as P
from .models import HOTBAR, INVENTORY
from .state import AppState
from .sync import SyncProtocol

NAME_COMMAND = "/name "


class Interaction:
    """Slot gestures and text commands, applied straight to the store.

    Press on a slot starts a drag and updates selection; release on a slot in
    the other container moves the petal and flushes the update to the server.
    """

    def __init__(self, state: AppState, sync: SyncProtocol):
        self.state = state
        self.sync = sync
        self.drag_source: Optional[Tuple[str, int]] = None
        self.selected_inventory: Set[int] = set()
        self.selected_hotbar: Optional[int] = None

    def press(self, container: str, slot: int):
        if container == HOTBAR:
            self.selected_hotbar = None if self.selected_hotbar == slot else slot
        elif container == INVENTORY:
            if slot in self.selected_inventory:
                self.selected_inventory.discard(slot)
            elif self.state.equipment.get(INVENTORY, slot) is not None:
                self.selected_inventory.add(slot)
        else:
            return
        self.drag_source = (container, slot)

    def release(self, container: str, slot: int) -> bool:
        source = self.drag_source
        self.drag_source = None
        if source is None:
            return False

        src_container, src_slot = source
        if src_container == container:
            return False

        store = self.state.equipment
        if not store.move_item(src_container, src_slot, container, slot):
            if store.get(container, slot) is not None:
                self.state.notify("Slot is occupied")
            return False
        if src_container == INVENTORY:
            self.selected_inventory.discard(src_slot)
        self.sync.flush()
        return True

    def cancel_drag(self):
        self.drag_source = None

    def _selected_petals(self) -> Set[int]:
        # a snapshot may have emptied a selected slot since it was picked
        store = self.state.equipment
        self.selected_inventory = {i for i in self.selected_inventory if store.get(INVENTORY, i) is not None}
        return self.selected_inventory

    def can_combine(self) -> bool:
        return len(self._selected_petals()) == P.COMBINE_COUNT

    def combine(self) -> bool:
        if not self.can_combine():
            self.state.notify("Select exactly 3 petals to combine.")
            return False
        if not self.sync.request_combine(self.selected_inventory):
            self.state.notify("Combine request not sent")
            return False
        self.selected_inventory.clear()
        return True

    def submit_name(self, name: str) -> bool:
        if not name.strip():
            self.state.notify("Name cannot be empty")
            return False
        return self.sync.send_set_name(name)

    def submit_chat(self, text: str) -> bool:
        if text.startswith(NAME_COMMAND):
            return self.submit_name(text[len(NAME_COMMAND):])
        return self.sync.send_chat(text)
