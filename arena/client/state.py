from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Tuple

from . import config as cfg
from .equipment import EquipmentStore
from .world import WorldCache

STATUS_CONNECTING = "Connecting..."
STATUS_CONNECTED = "Connected to server."
STATUS_ERROR = "Connection error."
STATUS_DISCONNECTED = "Disconnected from server."


@dataclass
class AppState:
    equipment: EquipmentStore
    world: WorldCache = field(default_factory=WorldCache)

    player_id: Optional[str] = None
    status: str = STATUS_CONNECTING
    chat: Deque[Tuple[str, str]] = field(default_factory=lambda: deque(maxlen=50))

    # transient UI notices, shown until the given loop time
    feedback: str = ""
    feedback_until: float = 0.0
    respawn_until: float = 0.0
    respawned: bool = False

    # loop clock in seconds, advanced by the game loop
    now: float = 0.0

    @classmethod
    def create(cls, config: cfg.ClientConfig) -> "AppState":
        return cls(equipment=EquipmentStore(config.hotbar_size, config.inventory_size))

    def local_player(self):
        return self.world.local_player(self.player_id)

    def notify(self, text: str):
        self.feedback = text
        self.feedback_until = self.now + cfg.FEEDBACK_SECONDS

    def current_feedback(self) -> str:
        return self.feedback if self.now < self.feedback_until else ""

    def showing_respawn(self) -> bool:
        return self.now < self.respawn_until
