"""Shared test fixtures."""

import pytest

from arena.client import config as cfg
from arena.client.camera import Camera
from arena.client.interaction import Interaction
from arena.client.loop import GameLoop
from arena.client.state import AppState
from arena.client.sync import SyncProtocol


class FakeNet:
    """Stands in for NetClient: records sends while connected."""

    def __init__(self):
        self.sent = []
        self.connected = True

    def send(self, msg: dict) -> bool:
        if not self.connected:
            return False
        self.sent.append(msg)
        return True

    def close(self):
        self.connected = False

    def of_type(self, msg_type: str) -> list:
        return [m for m in self.sent if m["type"] == msg_type]


class RecordingRenderer:
    def __init__(self):
        self.frames = []

    def draw(self, frame):
        self.frames.append(frame)


def petal(pid: str, ptype: str = "basic", tier: int = 1, **extra) -> dict:
    """A wire-format petal record."""
    rec = {"id": pid, "type": ptype, "tier": tier, "hp": 10, "maxHp": 10}
    rec.update(extra)
    return rec


def player(pid: str = "me", x: float = 0.0, y: float = 0.0, hotbar=None, inventory=None, **extra) -> dict:
    rec = {
        "id": pid, "x": x, "y": y, "hp": 100, "maxHp": 100, "name": pid,
        "petals": hotbar if hotbar is not None else [],
        "inventory": inventory if inventory is not None else [],
    }
    rec.update(extra)
    return rec


def update(seq=None, players=None, enemies=None, ground=None) -> dict:
    msg = {"type": "update", "players": players or [], "enemies": enemies or []}
    if seq is not None:
        msg["seq"] = seq
    if ground is not None:
        msg["groundItems"] = ground
    return msg


@pytest.fixture()
def config() -> cfg.ClientConfig:
    """Default session configuration: hotbar 5, inventory 10."""
    return cfg.ClientConfig()


@pytest.fixture()
def state(config: cfg.ClientConfig) -> AppState:
    return AppState.create(config)


@pytest.fixture()
def net() -> FakeNet:
    return FakeNet()


@pytest.fixture()
def sync(state: AppState, net: FakeNet) -> SyncProtocol:
    return SyncProtocol(state, net)


@pytest.fixture()
def interaction(state: AppState, sync: SyncProtocol) -> Interaction:
    return Interaction(state, sync)


@pytest.fixture()
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture()
def loop(state, sync, config, renderer) -> GameLoop:
    return GameLoop(state, sync, config, Camera(800, 600), renderer)


@pytest.fixture()
def joined(state: AppState, sync: SyncProtocol) -> AppState:
    """State after the server welcomed us as player 'me'."""
    sync.handle_message({"type": "welcome", "id": "me"})
    return state
