import pygame


class Camera:
    def __init__(self, screen_w: int, screen_h: int):
        self.pos = pygame.Vector2(0, 0)
        self.screen_w = screen_w
        self.screen_h = screen_h

    def center_on(self, world_pos):
        self.pos.x = float(world_pos[0]) - self.screen_w / 2
        self.pos.y = float(world_pos[1]) - self.screen_h / 2

    def screen_to_world(self, p):
        return pygame.Vector2(p) + self.pos

    def world_to_screen(self, p):
        return pygame.Vector2(p) - self.pos

    def visible(self, p, margin: float = 0.0) -> bool:
        sp = self.world_to_screen(p)
        return -margin <= sp.x <= self.screen_w + margin and -margin <= sp.y <= self.screen_h + margin
