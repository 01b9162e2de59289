"""
tick-character Demo
Drive one character with any of the four controllers: FSM, HSM, CSM, PDA.
"""

import logging
import sys

import pygame

from tick_character import (
    CONTROLLER_KINDS,
    GameLoop,
    InputMacro,
    InputSnapshot,
    MacroPlayer,
    SignalBus,
    make_controller,
    make_policy,
)

# --- Configuration ---
WIDTH, HEIGHT = 800, 600
FPS = 60
TITLE = "tick-character Demo"

CHARACTER_SIZE = 50
PROJECTILE_SIZE = (10, 5)
FLOOR_Y = 325

# Colors
BG_COLOR = (26, 26, 46)
FLOOR_COLOR = (70, 70, 100)
CHARACTER_COLOR = (0, 255, 0)
PROJECTILE_COLOR = (255, 0, 0)
HUD_COLOR = (200, 200, 220)
SIGNAL_COLOR = (255, 215, 0)

KIND_KEYS = {
    pygame.K_1: "fsm",
    pygame.K_2: "hsm",
    pygame.K_3: "csm",
    pygame.K_4: "pda",
}

SIGNAL_LOG_SIZE = 6


def poll_input(ctx) -> InputSnapshot:
    pressed = pygame.key.get_pressed()
    return InputSnapshot(
        move_left=bool(pressed[pygame.K_a]),
        move_right=bool(pressed[pygame.K_d]),
        jump=bool(pressed[pygame.K_SPACE]),
        fire=bool(pressed[pygame.K_RETURN]),
    )


def describe_state(controller) -> str:
    if hasattr(controller, "state"):
        return controller.state.value
    if hasattr(controller, "stack"):
        return " > ".join(s.value for s in controller.stack)
    if hasattr(controller, "active_paths"):
        return ", ".join(controller.active_paths())
    return ", ".join(name for name, on in controller.states.items() if on) or "-"


def main():
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(name)s: %(message)s")

    pygame.init()
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    pygame.display.set_caption(TITLE)
    pg_clock = pygame.time.Clock()
    font = pygame.font.SysFont("monospace", 14)

    bus = SignalBus()
    signal_log: list[str] = []

    def log_signal(name, data):
        detail = " ".join(f"{k}={v}" for k, v in data.items() if k != "controller")
        signal_log.append(f"{name}: {detail}")
        del signal_log[:-SIGNAL_LOG_SIZE]

    for name in ("transition", "entered", "exited", "landed", "fired"):
        bus.subscribe(name, log_signal)

    kind = CONTROLLER_KINDS[0]
    controller = make_controller(kind, bus=bus)
    loop = GameLoop(controller, poll_input, tps=FPS, bus=bus, policy=make_policy(controller))

    macro = InputMacro()
    player = MacroPlayer(macro)
    loop.player = player

    running = True

    while running:
        pg_clock.tick(FPS)

        # --- Events ---
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in KIND_KEYS:
                    kind = KIND_KEYS[event.key]
                    controller = make_controller(kind, bus=bus)
                    loop.set_controller(controller, make_policy(controller))
                elif event.key == pygame.K_r:
                    loop.recording = None if loop.recording is not None else macro
                elif event.key == pygame.K_e:
                    loop.recording = None
                    player.start()
                elif event.key == pygame.K_q:
                    player.stop()
                    macro.clear()
                elif event.key == pygame.K_p:
                    player.toggle_pause()
                elif event.key == pygame.K_z:
                    player.faster()
                elif event.key == pygame.K_c:
                    player.slower()
                elif event.key == pygame.K_u:
                    macro.undo()
                elif event.key == pygame.K_y:
                    macro.redo()

        # --- Update ---
        loop.step()

        # --- Draw ---
        screen.fill(BG_COLOR)
        pygame.draw.rect(screen, FLOOR_COLOR, pygame.Rect(0, FLOOR_Y, WIDTH, HEIGHT - FLOOR_Y))

        half = CHARACTER_SIZE // 2
        character = pygame.Rect(
            int(controller.x) - half, int(controller.y) - half, CHARACTER_SIZE, CHARACTER_SIZE
        )
        pygame.draw.rect(screen, CHARACTER_COLOR, character)

        pw, ph = PROJECTILE_SIZE
        for projectile in controller.projectiles:
            if 0 <= projectile.x <= WIDTH:
                rect = pygame.Rect(int(projectile.x) - pw // 2, int(projectile.y) - ph // 2, pw, ph)
                pygame.draw.rect(screen, PROJECTILE_COLOR, rect)

        # --- HUD ---
        if player.playing:
            macro_str = f"PLAYING ({player.remaining} left){' [PAUSED]' if player.paused else ''}"
        elif loop.recording is not None:
            macro_str = "RECORDING"
        else:
            macro_str = "idle"

        hud_lines = [
            f"Controller: {kind.upper()}   State: {describe_state(controller)}",
            f"x={controller.x:.1f}  y={controller.y:.1f}  vy={controller.vertical_velocity:.1f}"
            f"   Projectiles: {len(controller.projectiles)}",
            f"Macro: {len(macro)} steps  {macro_str}  delay={player.frame_delay}",
            "A/D=Walk  Space=Jump  Enter=Fire  1-4=Controller  Esc=Quit",
            "R=Record  E=Play  P=Pause  Z/C=Delay  U/Y=Undo/Redo  Q=Clear",
        ]
        for i, line in enumerate(hud_lines):
            surf = font.render(line, True, HUD_COLOR)
            screen.blit(surf, (10, 8 + i * 20))
        for i, line in enumerate(signal_log):
            surf = font.render(line, True, SIGNAL_COLOR)
            screen.blit(surf, (10, FLOOR_Y + 20 + i * 20))

        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
