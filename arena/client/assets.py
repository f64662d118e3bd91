import random
import pygame
from typing import Dict, List, Tuple

from . import config as cfg

def init_background_dots(seed: int, map_size: int) -> List[Tuple[int, int, int]]:
    rng = random.Random(seed)
    out = []
    for _ in range(cfg.BACKGROUND_DOTS):
        x = rng.randrange(-map_size, map_size)
        y = rng.randrange(-map_size, map_size)
        r = rng.choice([1, 1, 1, 2])
        out.append((x, y, r))
    return out

def petal_radius(tier: int) -> int:
    return cfg.PETAL_BASE_RADIUS + (max(1, tier) - 1) * cfg.PETAL_TIER_GROWTH

petal_sprite_cache: Dict[Tuple[Tuple[int, int, int], int, bool], pygame.Surface] = {}  # (color, radius, broken)->surf

def make_petal_sprite(color: Tuple[int, int, int], radius: int, broken: bool) -> pygame.Surface:
    size = radius * 2 + 4
    surf = pygame.Surface((size, size), pygame.SRCALPHA)
    c = size // 2

    alpha = 77 if broken else 255
    r, g, b = color
    shade = (max(0, r - 60), max(0, g - 60), max(0, b - 60), alpha)
    highlight = (min(255, r + 40), min(255, g + 40), min(255, b + 40), alpha // 2)

    pygame.draw.circle(surf, (r, g, b, alpha), (c, c), radius)
    pygame.draw.circle(surf, highlight, (c - radius // 4, c - radius // 4), max(2, radius // 3))
    pygame.draw.circle(surf, shade, (c, c), radius, 2)
    return surf

def get_petal_sprite(color: Tuple[int, int, int], tier: int, broken: bool) -> pygame.Surface:
    radius = petal_radius(tier)
    key = (tuple(color), radius, broken)
    tex = petal_sprite_cache.get(key)
    if tex is None:
        tex = make_petal_sprite(color, radius, broken)
        petal_sprite_cache[key] = tex
    return tex
