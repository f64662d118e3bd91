import math
import queue
from dataclasses import dataclass
from typing import List, Optional, Set

import pygame

from . import config as cfg
from .camera import Camera
from .state import AppState
from .sync import SyncProtocol
from .world import WorldSnapshot

TWO_PI = 2 * math.pi


@dataclass
class HeldKeys:
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    retract: bool = False


@dataclass
class Frame:
    """Everything the renderer needs for one frame."""
    snapshot: WorldSnapshot
    camera: Camera
    player_id: Optional[str]
    local_pos: Optional[pygame.Vector2]
    phase: float
    retracting: bool


def movement_vector(keys: HeldKeys) -> pygame.Vector2:
    move = pygame.Vector2(0, 0)
    if keys.up: move.y -= 1
    if keys.down: move.y += 1
    if keys.left: move.x -= 1
    if keys.right: move.x += 1

    if move.length_squared() > 0:
        move = move.normalize()
    return move

def orbit_angles(phase: float, count: int, retracting: bool = False) -> List[float]:
    step = TWO_PI / max(count, 1)
    offset = math.pi if retracting else 0.0
    return [phase + offset + i * step for i in range(count)]


class GameLoop:
    """One tick per display frame; never raises for game or network conditions.

    Order within a tick: movement, movement send, orbit phase, camera, draw,
    proximity pickup. Without a live local player only the orbit, camera and
    draw steps run.
    """

    def __init__(self, state: AppState, sync: SyncProtocol, config: cfg.ClientConfig,
                 camera: Camera, renderer=None, inbox: "Optional[queue.Queue[dict]]" = None):
        self.state = state
        self.sync = sync
        self.config = config
        self.camera = camera
        self.renderer = renderer
        self.inbox = inbox

        self.phase = 0.0
        self.frames = 0
        self.predicted: Optional[pygame.Vector2] = None
        self._attack_timer = 0.0
        self._full_near: Set[str] = set()

    def drain_inbox(self) -> int:
        if self.inbox is None:
            return 0
        n = 0
        while True:
            try:
                msg = self.inbox.get_nowait()
            except queue.Empty:
                break
            self.sync.handle_message(msg)
            n += 1
        return n

    def tick(self, dt: float, keys: HeldKeys) -> Frame:
        self.state.now += dt
        self.frames += 1

        if self.state.respawned:
            self.predicted = None
            self.state.respawned = False

        me = self.state.local_player()
        alive = me is not None and not me.dead

        local_pos = None
        if alive:
            local_pos = self._move(me, keys, dt)
            self._attack_heartbeat(dt)

        self.phase = (self.phase + cfg.ORBIT_STEP) % TWO_PI
        self._assign_orbits(keys.retract)

        if local_pos is not None:
            self.camera.center_on(local_pos)

        frame = Frame(
            snapshot=self.state.world.current,
            camera=self.camera,
            player_id=self.state.player_id,
            local_pos=local_pos,
            phase=self.phase,
            retracting=keys.retract,
        )
        if self.renderer is not None:
            self.renderer.draw(frame)

        if local_pos is not None:
            self._pickups(local_pos)
        return frame

    def _move(self, me, keys: HeldKeys, dt: float) -> pygame.Vector2:
        direction = movement_vector(keys)

        if self.config.movement_mode == cfg.MOVEMENT_PREDICTED:
            if self.predicted is None:
                self.predicted = pygame.Vector2(me.x, me.y)
            self.predicted += direction * (cfg.PLAYER_SPEED * dt)
            self.predicted.x = max(-cfg.MAP_SIZE, min(cfg.MAP_SIZE, self.predicted.x))
            self.predicted.y = max(-cfg.MAP_SIZE, min(cfg.MAP_SIZE, self.predicted.y))
            pos = pygame.Vector2(self.predicted)
        else:
            pos = pygame.Vector2(me.x, me.y)

        self.sync.send_movement(self.config.movement_mode, direction.x, direction.y, pos.x, pos.y, keys.retract)
        return pos

    def _attack_heartbeat(self, dt: float):
        self._attack_timer += dt
        if self._attack_timer >= cfg.ATTACK_TICK_INTERVAL:
            self._attack_timer -= cfg.ATTACK_TICK_INTERVAL
            self.sync.send_attack_tick()

    def _assign_orbits(self, retracting: bool):
        equipped = self.state.equipment.equipped()
        for petal, angle in zip(equipped, orbit_angles(self.phase, len(equipped), retracting)):
            petal.angle = angle

    def _pickups(self, pos: pygame.Vector2):
        store = self.state.equipment
        world = self.state.world
        radius = self.config.pickup_radius

        picked = 0
        blocked = set()
        for item in list(world.current.ground_items.values()):
            if math.hypot(item.x - pos.x, item.y - pos.y) > radius:
                continue
            if store.free_inventory_slots() == 0:
                blocked.add(item.id)
                continue
            if store.pick_up(item.petal) is not None:
                world.remove_ground_item(item.id)
                picked += 1

        # notice only for items that just came into reach
        if blocked - self._full_near:
            self.state.notify("Inventory full")
        self._full_near = blocked

        if picked:
            self.sync.flush()
