import argparse
import pygame

from . import config as cfg
from .camera import Camera
from .input import SlotLayout, held_keys
from .interaction import Interaction
from .loop import GameLoop, HeldKeys
from .netclient import NetClient
from .render import SceneRenderer
from .state import AppState
from .sync import SyncProtocol

def parse_args(argv=None) -> cfg.ClientConfig:
    base = cfg.ClientConfig.from_env()
    ap = argparse.ArgumentParser(description="Petal arena client")
    ap.add_argument("--url", default=base.server_url, help="server WebSocket URL")
    ap.add_argument("--name", default=base.name)
    ap.add_argument("--movement", choices=cfg.MOVEMENT_MODES, default=base.movement_mode)
    ap.add_argument("--hotbar", type=int, default=base.hotbar_size)
    ap.add_argument("--inventory", type=int, default=base.inventory_size)
    ap.add_argument("--pickup-radius", type=float, default=base.pickup_radius)
    args = ap.parse_args(argv)
    return cfg.ClientConfig(
        server_url=args.url,
        name=args.name,
        hotbar_size=args.hotbar,
        inventory_size=args.inventory,
        pickup_radius=args.pickup_radius,
        movement_mode=args.movement,
    )

def main(argv=None):
    config = parse_args(argv)

    pygame.init()
    screen = pygame.display.set_mode((cfg.WINDOW_W, cfg.WINDOW_H))
    pygame.display.set_caption("Petal Arena")
    W, H = screen.get_size()
    clock = pygame.time.Clock()

    state = AppState.create(config)
    net = NetClient()
    sync = SyncProtocol(state, net)
    interaction = Interaction(state, sync)
    layout = SlotLayout(W, H, config.hotbar_size, config.inventory_size)
    renderer = SceneRenderer(screen, state, interaction, layout)
    loop = GameLoop(state, sync, config, Camera(W, H), renderer, inbox=net.inbox)

    print(f"[client] connecting to {config.server_url} as {config.name!r} ({config.movement_mode} movement)")
    net.connect(config.server_url, config.name)

    running = True
    while running:
        dt = clock.tick(cfg.RENDER_HZ) / 1000.0

        # Drain network inbox on main thread
        loop.drain_inbox()

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False

            elif e.type == pygame.KEYDOWN:
                if renderer.chat_input is not None:
                    if e.key == pygame.K_RETURN:
                        text = renderer.chat_input
                        renderer.chat_input = None
                        pygame.key.stop_text_input()
                        if text.strip():
                            interaction.submit_chat(text)
                    elif e.key == pygame.K_ESCAPE:
                        renderer.chat_input = None
                        pygame.key.stop_text_input()
                    elif e.key == pygame.K_BACKSPACE:
                        renderer.chat_input = renderer.chat_input[:-1]
                elif e.key == pygame.K_ESCAPE:
                    running = False
                elif e.key == pygame.K_RETURN:
                    renderer.chat_input = ""
                    pygame.key.start_text_input()
                elif e.key == pygame.K_c:
                    interaction.combine()

            elif e.type == pygame.TEXTINPUT and renderer.chat_input is not None:
                renderer.chat_input += e.text

            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                if layout.on_combine(e.pos):
                    interaction.combine()
                else:
                    hit = layout.slot_at(e.pos)
                    if hit is not None:
                        interaction.press(*hit)

            elif e.type == pygame.MOUSEBUTTONUP and e.button == 1:
                hit = layout.slot_at(e.pos)
                if hit is not None:
                    interaction.release(*hit)
                else:
                    interaction.cancel_drag()

        keys = HeldKeys() if renderer.chat_input is not None else held_keys(pygame.key.get_pressed())
        loop.tick(dt, keys)

        pygame.display.flip()

    net.close()
    pygame.quit()

if __name__ == "__main__":
    main()
