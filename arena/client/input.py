import pygame
from typing import Dict, Optional, Tuple

from . import config as cfg
from .loop import HeldKeys
from .models import HOTBAR, INVENTORY

Slot = Tuple[str, int]


def row_rects(count: int, center_x: int, top: int) -> list:
    width = count * cfg.SLOT_SIZE + (count - 1) * cfg.SLOT_GAP
    left = center_x - width // 2
    return [
        pygame.Rect(left + i * (cfg.SLOT_SIZE + cfg.SLOT_GAP), top, cfg.SLOT_SIZE, cfg.SLOT_SIZE)
        for i in range(count)
    ]


class SlotLayout:
    """Screen rects for the hotbar row, the inventory row above it, and the combine button."""

    def __init__(self, screen_w: int, screen_h: int, hotbar_size: int, inventory_size: int):
        hotbar_top = screen_h - cfg.PANEL_MARGIN - cfg.SLOT_SIZE
        inventory_top = hotbar_top - cfg.SLOT_GAP * 2 - cfg.SLOT_SIZE

        self.rects: Dict[Slot, pygame.Rect] = {}
        for i, r in enumerate(row_rects(hotbar_size, screen_w // 2, hotbar_top)):
            self.rects[(HOTBAR, i)] = r
        inv = row_rects(inventory_size, screen_w // 2, inventory_top)
        for i, r in enumerate(inv):
            self.rects[(INVENTORY, i)] = r

        right = inv[-1].right if inv else screen_w // 2
        self.combine_rect = pygame.Rect(right + cfg.SLOT_GAP * 2, inventory_top, 110, cfg.SLOT_SIZE)

    def rect(self, container: str, slot: int) -> pygame.Rect:
        return self.rects[(container, slot)]

    def slot_at(self, pos) -> Optional[Slot]:
        for key, r in self.rects.items():
            if r.collidepoint(pos):
                return key
        return None

    def on_combine(self, pos) -> bool:
        return bool(self.combine_rect.collidepoint(pos))


def held_keys(pressed) -> HeldKeys:
    return HeldKeys(
        up=bool(pressed[pygame.K_w] or pressed[pygame.K_UP]),
        down=bool(pressed[pygame.K_s] or pressed[pygame.K_DOWN]),
        left=bool(pressed[pygame.K_a] or pressed[pygame.K_LEFT]),
        right=bool(pressed[pygame.K_d] or pressed[pygame.K_RIGHT]),
        retract=bool(pressed[pygame.K_r]),
    )
