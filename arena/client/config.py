import os
from dataclasses import dataclass

SERVER_URL = "wss://plorrabackend.onrender.com"
PLAYER_NAME = "player"

RENDER_HZ = 60
WINDOW_W, WINDOW_H = 1280, 800

# World
MAP_SIZE = 3000
SAFE_ZONE_RADIUS = 200
BACKGROUND_SEED = 1337
BACKGROUND_DOTS = 1500

# Equipment
HOTBAR_SIZE = 5
INVENTORY_SIZE = 10
PICKUP_RADIUS = 30.0

# Movement
MOVEMENT_INTENT = "intent"        # server resolves position from dx/dy
MOVEMENT_PREDICTED = "predicted"  # client moves itself and reports x/y
MOVEMENT_MODES = (MOVEMENT_INTENT, MOVEMENT_PREDICTED)
PLAYER_SPEED = 220.0

# Orbit
ORBIT_STEP = 0.05  # radians per tick
DEFAULT_ORBIT_RADIUS = 50.0
DEFAULT_ORBIT_SPEED = 1.0

ATTACK_TICK_INTERVAL = 0.25  # seconds

PLAYER_RADIUS = 20
PETAL_BASE_RADIUS = 10
PETAL_TIER_GROWTH = 4

# UI
SLOT_SIZE = 48
SLOT_GAP = 8
PANEL_MARGIN = 16
CHAT_LINES = 8
FEEDBACK_SECONDS = 2.5
RESPAWN_NOTICE_SECONDS = 3.0

PETAL_COLORS = {
    "basic": (255, 255, 255),
    "rock": (136, 136, 136),
    "fire": (255, 85, 85),
    "ice": (85, 170, 255),
    "poison": (85, 255, 85),
    "electric": (255, 234, 0),
    "shield": (170, 85, 170),
}
DEFAULT_PETAL_COLOR = (170, 170, 170)

HOSTILE_COLORS = {
    "wanderer": (255, 255, 0),
    "chaser": (255, 153, 0),
    "spinner": (255, 0, 255),
    "miniboss": (255, 0, 0),
}
DEFAULT_HOSTILE_COLOR = (153, 153, 153)


@dataclass
class ClientConfig:
    server_url: str = SERVER_URL
    name: str = PLAYER_NAME
    hotbar_size: int = HOTBAR_SIZE
    inventory_size: int = INVENTORY_SIZE
    pickup_radius: float = PICKUP_RADIUS
    movement_mode: str = MOVEMENT_INTENT

    def __post_init__(self):
        if self.movement_mode not in MOVEMENT_MODES:
            raise ValueError(f"unknown movement mode: {self.movement_mode!r}")
        if self.hotbar_size < 1 or self.inventory_size < 1:
            raise ValueError("container capacities must be at least 1")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        return cls(
            server_url=os.environ.get("ARENA_SERVER_URL", SERVER_URL),
            name=os.environ.get("ARENA_PLAYER_NAME", PLAYER_NAME),
            movement_mode=os.environ.get("ARENA_MOVEMENT_MODE", MOVEMENT_INTENT),
        )
