import argparse
import sys
from pathlib import Path
from typing import List, Optional

import pygame

from engine.battle.world import World
from engine.config import load_config
from engine.error_handler import MapDataError, log_error, logger, setup_logging
from engine.scenes.battle_scene import BattleScene
from settings import FPS, TITLE
from telemetry.logger import telemetry
from world.map_data import load_map


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=TITLE)
    parser.add_argument("--map", type=Path, default=None, help="Tiled JSON map to play")
    parser.add_argument("--config", type=Path, default=None, help="settings.json to load")
    parser.add_argument("--telemetry", type=Path, default=None, help="write JSON-lines telemetry here")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging()
    config = load_config(args.config)

    map_path = args.map or Path(config.map_path)
    try:
        map_data = load_map(map_path)
        world = World.from_map(map_data, config=config)
    except MapDataError as e:
        log_error(e, "load_map")
        print(f"Cannot start level: {e.user_message}", file=sys.stderr)
        return 1

    if args.telemetry is not None:
        telemetry.init(args.telemetry)
        telemetry.set_context(map=map_path.name)

    pygame.init()
    pygame.display.set_caption(TITLE)
    flags = pygame.FULLSCREEN if config.fullscreen else 0
    screen = pygame.display.set_mode(config.get_resolution(), flags)
    clock = pygame.time.Clock()

    scene = BattleScene(screen, world)
    logger.info("Starting %s on %s", TITLE, map_path)

    # --- Main loop ---
    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
                continue
            scene.handle_event(event)

        scene.update(dt)
        scene.draw()
        pygame.display.flip()

    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
