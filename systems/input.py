from __future__ import annotations

from enum import Enum
from typing import Dict, List, Set, Union

import pygame


ActionType = Union["InputAction", str]


class InputAction(str, Enum):
    """
    Logical input actions the game can respond to.

    These are intentionally decoupled from any specific key so bindings can
    be remapped without touching game logic.
    """

    # Single-step moves / attacks for the selected unit (compass order)
    STEP_NW = "step_nw"
    STEP_N = "step_n"
    STEP_NE = "step_ne"
    STEP_W = "step_w"
    STEP_E = "step_e"
    STEP_SW = "step_sw"
    STEP_S = "step_s"
    STEP_SE = "step_se"

    # Selection
    SELECT_NEXT = "select_next"
    SELECT_1 = "select_1"
    SELECT_2 = "select_2"
    SELECT_3 = "select_3"
    SELECT_4 = "select_4"
    SELECT_5 = "select_5"
    SELECT_6 = "select_6"
    SELECT_7 = "select_7"
    SELECT_8 = "select_8"
    SELECT_9 = "select_9"

    END_TURN = "end_turn"

    # Dismiss dialogue
    CONFIRM = "confirm"


class InputManager:
    """
    Centralised stateful input handler.

    Responsibilities:
    - Maintain bindings: logical InputAction -> one or more pygame keycodes.
    - Track which keys are currently held down, so key repeats fire once.
    - Translate a key event into the actions bound to it.
    """

    def __init__(self) -> None:
        # Map from action -> set of pygame key constants
        self._bindings: Dict[InputAction, Set[int]] = {}

        # Low-level key state
        self._keys_down: Set[int] = set()

    # ------------------------------------------------------------------
    # Binding helpers
    # ------------------------------------------------------------------

    def _normalise_action(self, action: ActionType) -> InputAction:
        if isinstance(action, InputAction):
            return action
        # Unknown strings raise ValueError: better than a dead binding.
        return InputAction(action)

    def bind_key(self, action: ActionType, key: int) -> None:
        """Bind a pygame key constant to the given logical action."""
        act = self._normalise_action(action)
        self._bindings.setdefault(act, set()).add(int(key))

    def actions_for_key(self, key: int) -> List[InputAction]:
        """All actions bound to `key`, in declaration order."""
        return [act for act in InputAction if int(key) in self._bindings.get(act, ())]

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def process_event(self, event: pygame.event.Event) -> List[InputAction]:
        """
        Consume a raw pygame event and update internal key state.

        Returns the actions triggered by a fresh key press (empty for key
        repeats, key releases and non-key events).
        """
        if event.type == pygame.KEYDOWN:
            key = int(getattr(event, "key", -1))
            if key >= 0 and key not in self._keys_down:
                self._keys_down.add(key)
                return self.actions_for_key(key)
        elif event.type == pygame.KEYUP:
            key = int(getattr(event, "key", -1))
            self._keys_down.discard(key)
        return []
