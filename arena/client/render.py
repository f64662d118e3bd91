import math
import pygame
from typing import List, Optional, Tuple

from . import config as cfg
from .assets import get_petal_sprite, init_background_dots
from .input import SlotLayout
from .interaction import Interaction
from .loop import Frame, orbit_angles
from .models import HOTBAR, INVENTORY, Petal, PlayerView, petals_from_wire
from .state import AppState

def health_fraction(hp: float, hp_max: float) -> float:
    if hp_max <= 0:
        return 0.0
    return max(0.0, min(1.0, hp / hp_max))

def draw_health_bar(surface, screen_pos, w, hp, hp_max):
    pct = health_fraction(hp, hp_max)
    x = int(screen_pos.x - w // 2)
    y = int(screen_pos.y)
    back = pygame.Rect(x, y, w, 6)
    fill = pygame.Rect(x, y, int(w * pct), 6)
    pygame.draw.rect(surface, (200, 30, 30), back)
    pygame.draw.rect(surface, (0, 255, 0), fill)

def draw_petal(surface, center, petal: Petal):
    tex = get_petal_sprite(petal.color, petal.tier, petal.broken)
    rect = tex.get_rect(center=(int(center[0]), int(center[1])))
    surface.blit(tex, rect)

def draw_orbit(surface, center: pygame.Vector2, radius: float, petals: List[Petal], angles: List[float]):
    for petal, angle in zip(petals, angles):
        px = center.x + radius * math.cos(angle)
        py = center.y + radius * math.sin(angle)
        draw_petal(surface, (px, py), petal)

def draw_background(screen: pygame.Surface, dots: List[Tuple[int, int, int]], camera):
    W, H = camera.screen_w, camera.screen_h
    cx, cy = camera.pos.x, camera.pos.y
    for x, y, r in dots:
        sx = x - cx
        sy = y - cy
        if -2 <= sx <= W + 2 and -2 <= sy <= H + 2:
            pygame.draw.circle(screen, (60, 70, 60), (int(sx), int(sy)), r)

    origin = camera.world_to_screen((0, 0))
    if camera.visible((0, 0), cfg.SAFE_ZONE_RADIUS):
        pygame.draw.circle(screen, (0, 120, 0), (int(origin.x), int(origin.y)), cfg.SAFE_ZONE_RADIUS, 5)

def draw_ground_items(screen: pygame.Surface, frame: Frame):
    for item in frame.snapshot.ground_items.values():
        if not frame.camera.visible((item.x, item.y), 30):
            continue
        sp = frame.camera.world_to_screen((item.x, item.y))
        draw_petal(screen, sp, item.petal)

def draw_hostiles(screen: pygame.Surface, frame: Frame):
    for h in frame.snapshot.hostiles.values():
        if h.dead or not frame.camera.visible((h.x, h.y), h.size + 20):
            continue
        sp = frame.camera.world_to_screen((h.x, h.y))
        color = cfg.HOSTILE_COLORS.get(h.type, cfg.DEFAULT_HOSTILE_COLOR)
        size = max(1, int(h.size))
        if h.type == "spinner":
            pts = [(sp.x + size * math.cos(a), sp.y + size * math.sin(a))
                   for a in (i * math.pi / 3 for i in range(6))]
            pygame.draw.polygon(screen, color, pts)
        elif h.type == "miniboss":
            pygame.draw.rect(screen, color, pygame.Rect(sp.x - size, sp.y - size, size * 2, size * 2))
        else:
            pygame.draw.circle(screen, color, (int(sp.x), int(sp.y)), size)
        draw_health_bar(screen, sp + pygame.Vector2(0, -size - 10), size * 2, h.hp, h.max_hp)

def player_screen_pos(p: PlayerView, frame: Frame) -> pygame.Vector2:
    if p.id == frame.player_id and frame.local_pos is not None:
        return frame.camera.world_to_screen(frame.local_pos)
    return frame.camera.world_to_screen((p.x, p.y))

def draw_players(screen: pygame.Surface, frame: Frame, font: pygame.font.Font):
    for p in frame.snapshot.players.values():
        if p.dead:
            continue
        sp = player_screen_pos(p, frame)
        if not (-200 <= sp.x <= frame.camera.screen_w + 200 and -200 <= sp.y <= frame.camera.screen_h + 200):
            continue

        is_me = p.id == frame.player_id
        color = (255, 255, 255) if is_me else (136, 136, 136)
        pygame.draw.circle(screen, color, (int(sp.x), int(sp.y)), cfg.PLAYER_RADIUS)
        if is_me:
            pygame.draw.circle(screen, (0, 200, 255), (int(sp.x), int(sp.y)), cfg.PLAYER_RADIUS, 2)

        draw_health_bar(screen, sp + pygame.Vector2(0, -30), 40, p.hp, p.max_hp)

        label = font.render(p.name, True, (255, 255, 255))
        screen.blit(label, label.get_rect(center=(int(sp.x), int(sp.y + 40))))

        if not is_me:
            petals = [x for x in petals_from_wire(p.hotbar, HOTBAR) if x is not None]
            angles = orbit_angles(frame.phase * p.orbit_speed, len(petals), p.retracting)
            draw_orbit(screen, sp, p.orbit_radius, petals, angles)


class SceneRenderer:
    """Draws the world from a Frame, then the local petals, panels and HUD."""

    def __init__(self, screen: pygame.Surface, state: AppState, interaction: Interaction, layout: SlotLayout):
        self.screen = screen
        self.state = state
        self.interaction = interaction
        self.layout = layout
        self.font = pygame.font.SysFont("consolas", 18)
        self.small = pygame.font.SysFont("consolas", 14)
        self.big = pygame.font.SysFont("consolas", 36)
        self.dots = init_background_dots(cfg.BACKGROUND_SEED, cfg.MAP_SIZE)
        self.chat_input: Optional[str] = None

    def draw(self, frame: Frame):
        screen = self.screen
        screen.fill((30, 40, 30))

        draw_background(screen, self.dots, frame.camera)
        draw_ground_items(screen, frame)
        draw_hostiles(screen, frame)
        draw_players(screen, frame, self.small)
        self.draw_local_petals(frame)

        self.draw_panels()
        self.draw_hud()
        self.draw_chat()

    def draw_local_petals(self, frame: Frame):
        me = self.state.local_player()
        if me is None or me.dead:
            return
        center = player_screen_pos(me, frame)
        equipped = self.state.equipment.equipped()
        draw_orbit(self.screen, center, me.orbit_radius, equipped, [p.angle for p in equipped])

    def draw_panels(self):
        store = self.state.equipment
        ia = self.interaction
        for container, slots in ((HOTBAR, store.hotbar), (INVENTORY, store.inventory)):
            for i, petal in enumerate(slots):
                r = self.layout.rect(container, i)
                selected = (container == HOTBAR and ia.selected_hotbar == i) or \
                           (container == INVENTORY and i in ia.selected_inventory)
                dragging = ia.drag_source == (container, i)

                pygame.draw.rect(self.screen, (20, 24, 20), r)
                border = (255, 220, 0) if selected else (0, 200, 255) if dragging else (90, 100, 90)
                pygame.draw.rect(self.screen, border, r, 2)
                if petal is not None:
                    draw_petal(self.screen, r.center, petal)
                    tier = self.small.render(str(petal.tier), True, (220, 220, 230))
                    self.screen.blit(tier, (r.right - 12, r.bottom - 16))

        b = self.layout.combine_rect
        enabled = ia.can_combine()
        pygame.draw.rect(self.screen, (40, 90, 40) if enabled else (40, 40, 40), b)
        pygame.draw.rect(self.screen, (90, 100, 90), b, 2)
        lab = self.font.render("(C)ombine", True, (230, 230, 230) if enabled else (120, 120, 120))
        self.screen.blit(lab, lab.get_rect(center=b.center))

    def draw_hud(self):
        state = self.state
        me = state.local_player()
        if me is not None:
            n_equipped = len(state.equipment.equipped())
            n_inventory = state.equipment.capacity(INVENTORY) - state.equipment.free_inventory_slots()
            info = (f"HP: {me.hp:g}/{me.max_hp:g} | Level: {me.level} | XP: {me.xp} | Coins: {me.coins}"
                    f" | Petals: {n_equipped}/{me.petal_slots} | Inventory: {n_inventory}")
            self.screen.blit(self.font.render(info, True, (220, 220, 230)), (14, 14))

        self.screen.blit(self.small.render(state.status, True, (160, 160, 175)), (14, 40))

        feedback = state.current_feedback()
        if feedback:
            lab = self.font.render(feedback, True, (255, 200, 80))
            self.screen.blit(lab, lab.get_rect(center=(self.screen.get_width() // 2, self.layout.combine_rect.top - 24)))

        if state.showing_respawn():
            lab = self.big.render("You died! Respawning...", True, (255, 90, 90))
            self.screen.blit(lab, lab.get_rect(center=(self.screen.get_width() // 2, self.screen.get_height() // 3)))

    def draw_chat(self):
        y = 70
        for sender, message in list(self.state.chat)[-cfg.CHAT_LINES:]:
            self.screen.blit(self.small.render(f"{sender}: {message}", True, (200, 200, 210)), (14, y))
            y += 18
        if self.chat_input is not None:
            box = pygame.Rect(14, y + 4, 420, 24)
            pygame.draw.rect(self.screen, (10, 12, 10), box)
            pygame.draw.rect(self.screen, (0, 200, 255), box, 1)
            self.screen.blit(self.small.render(self.chat_input + "_", True, (230, 230, 230)), (box.x + 4, box.y + 4))
