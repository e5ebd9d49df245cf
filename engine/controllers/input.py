from __future__ import annotations

from typing import Dict, Tuple

import pygame

from systems.input import InputAction, InputManager


# Grid delta clicked by each step action (relative to the selected unit).
STEP_DELTAS: Dict[InputAction, Tuple[int, int]] = {
    InputAction.STEP_NW: (-1, -1),
    InputAction.STEP_N: (0, -1),
    InputAction.STEP_NE: (1, -1),
    InputAction.STEP_W: (-1, 0),
    InputAction.STEP_E: (1, 0),
    InputAction.STEP_SW: (-1, 1),
    InputAction.STEP_S: (0, 1),
    InputAction.STEP_SE: (1, 1),
}

# Roster index selected by each number action.
SELECT_INDICES: Dict[InputAction, int] = {
    InputAction.SELECT_1: 0,
    InputAction.SELECT_2: 1,
    InputAction.SELECT_3: 2,
    InputAction.SELECT_4: 3,
    InputAction.SELECT_5: 4,
    InputAction.SELECT_6: 5,
    InputAction.SELECT_7: 6,
    InputAction.SELECT_8: 7,
    InputAction.SELECT_9: 8,
}


def create_default_input_manager() -> InputManager:
    """
    Create an InputManager instance with the game's default keyboard bindings.

    Keeps all key-to-action wiring in one place.
    """
    mgr = InputManager()

    # ------------------------------------------------------------------
    # Stepping: the QWE / A_D / ZXC ring around S, plus S for down
    # ------------------------------------------------------------------
    mgr.bind_key(InputAction.STEP_NW, pygame.K_q)
    mgr.bind_key(InputAction.STEP_N, pygame.K_w)
    mgr.bind_key(InputAction.STEP_NE, pygame.K_e)
    mgr.bind_key(InputAction.STEP_W, pygame.K_a)
    mgr.bind_key(InputAction.STEP_S, pygame.K_s)
    mgr.bind_key(InputAction.STEP_E, pygame.K_d)
    mgr.bind_key(InputAction.STEP_SW, pygame.K_z)
    mgr.bind_key(InputAction.STEP_SE, pygame.K_c)

    # Arrow keys for the orthogonal steps
    mgr.bind_key(InputAction.STEP_N, pygame.K_UP)
    mgr.bind_key(InputAction.STEP_S, pygame.K_DOWN)
    mgr.bind_key(InputAction.STEP_W, pygame.K_LEFT)
    mgr.bind_key(InputAction.STEP_E, pygame.K_RIGHT)

    # ------------------------------------------------------------------
    # Selection / turn
    # ------------------------------------------------------------------
    mgr.bind_key(InputAction.SELECT_NEXT, pygame.K_TAB)
    number_keys = [pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_5,
                   pygame.K_6, pygame.K_7, pygame.K_8, pygame.K_9]
    for action, key in zip(SELECT_INDICES, number_keys):
        mgr.bind_key(action, key)

    mgr.bind_key(InputAction.END_TURN, pygame.K_SPACE)

    mgr.bind_key(InputAction.CONFIRM, pygame.K_RETURN)
    mgr.bind_key(InputAction.CONFIRM, pygame.K_KP_ENTER)
    mgr.bind_key(InputAction.CONFIRM, pygame.K_ESCAPE)

    return mgr
