from typing import Iterable, Optional

from arena.net import protocol as P
from . import config as cfg
from . import state as S
from .models import INVENTORY
from .state import AppState
from .world import WorldSnapshot


def snapshot_seq(msg: dict) -> Optional[float]:
    for key in P.SEQ_KEYS:
        v = msg.get(key)
        if v is None:
            continue
        try:
            return float(v)
        except (TypeError, ValueError):
            continue
    return None


class SyncProtocol:
    """Moves equipment edits out to the server and authoritative state in.

    Outbound traffic is driven by discrete actions only (drop, pickup,
    combine); the frame loop never flushes. Inbound snapshots are applied in
    arrival order and any snapshot whose sequence is not newer than the last
    applied one is dropped. The local player's record in an accepted snapshot
    overwrites the equipment store (server-wins).
    """

    def __init__(self, state: AppState, net):
        self.state = state
        self.net = net
        self.last_seq: Optional[float] = None

    # =========================
    # Outbound
    # =========================
    def send(self, msg: dict) -> bool:
        if not self.net.connected:
            return False
        return self.net.send(msg)

    def flush(self) -> bool:
        store = self.state.equipment
        if not store.dirty:
            return False
        hotbar, inventory = store.serialize()
        if not self.send(P.update_petals(hotbar, inventory)):
            return False
        store.mark_clean()
        return True

    def request_combine(self, indices: Iterable[int]) -> bool:
        indices = sorted(set(int(i) for i in indices))
        if len(indices) != P.COMBINE_COUNT:
            return False
        capacity = self.state.equipment.capacity(INVENTORY)
        if any(not 0 <= i < capacity for i in indices):
            return False
        if any(self.state.equipment.get(INVENTORY, i) is None for i in indices):
            return False
        return self.send(P.combine_petals(indices))

    def send_join(self, name: str) -> bool:
        return self.send(P.join(name))

    def send_set_name(self, name: str) -> bool:
        name = name.strip()
        if not name:
            return False
        return self.send(P.set_name(name))

    def send_chat(self, message: str) -> bool:
        message = message.strip()
        if not message:
            return False
        return self.send(P.chat(message))

    def send_attack_tick(self) -> bool:
        return self.send(P.attack_tick())

    def send_movement(self, mode: str, dx: float, dy: float, x: float, y: float, retract: bool) -> bool:
        if mode == cfg.MOVEMENT_PREDICTED:
            return self.send(P.move(x, y))
        return self.send(P.move_intent(dx, dy, retract))

    # =========================
    # Inbound
    # =========================
    def handle_message(self, msg) -> bool:
        """Apply one server message. Returns False when it was ignored."""
        if not isinstance(msg, dict):
            return False
        t = msg.get("type")

        if t in P.WELCOME_TYPES:
            if msg.get("id") is None:
                return False
            self.state.player_id = str(msg["id"])
            self.state.status = S.STATUS_CONNECTED
            print(f"[sync] welcome player_id={self.state.player_id}")
            return True

        if t in P.SNAPSHOT_TYPES:
            return self.apply_snapshot(msg)

        if t == P.CHAT:
            sender = str(msg.get("from") or "Anonymous")
            self.state.chat.append((sender, str(msg.get("message", ""))))
            return True

        if t == P.RESPAWN:
            self.state.respawn_until = self.state.now + cfg.RESPAWN_NOTICE_SECONDS
            self.state.respawned = True
            return True

        if t == P.DISCONNECT:
            failed = bool(msg.get("failed"))
            self.state.status = S.STATUS_ERROR if failed else S.STATUS_DISCONNECTED
            print(f"[sync] disconnected: {msg.get('error')}")
            self.net.close()
            return True

        return False

    def apply_snapshot(self, msg: dict) -> bool:
        seq = snapshot_seq(msg)
        if seq is not None:
            if self.last_seq is not None and seq <= self.last_seq:
                print(f"[sync] discarded stale snapshot seq={seq:g} (last={self.last_seq:g})")
                return False
            self.last_seq = seq

        snapshot = WorldSnapshot.from_message(msg, seq)
        self.state.world.replace(snapshot)

        me = snapshot.players.get(self.state.player_id) if self.state.player_id is not None else None
        if me is not None:
            self.state.equipment.apply_authoritative(me.hotbar, me.inventory)
        return True
