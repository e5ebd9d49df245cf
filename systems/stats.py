from dataclasses import dataclass, field


@dataclass
class Statistics:
    """
    Hit points and action points of a character.

    Current values always stay within [0, max]. Both pools start full.
    """
    max_hit_points: int = 3
    max_action_points: int = 3

    _hit_points: int = field(init=False, repr=False)
    _action_points: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_hit_points < 0 or self.max_action_points < 0:
            raise ValueError("Statistics maxima must be non-negative")
        self._hit_points = self.max_hit_points
        self._action_points = self.max_action_points

    # ------------------------------------------------------------------
    # Action points
    # ------------------------------------------------------------------

    @property
    def action_points(self) -> int:
        return self._action_points

    def use_action_points(self, amount: int = 1) -> bool:
        """
        Spend `amount` action points.

        Returns False (and spends nothing) if there are not enough left.
        """
        _check_amount(amount)
        remaining = self._action_points - amount
        if remaining < 0:
            return False
        self._action_points = remaining
        return True

    def restore_by(self, amount: int = 1) -> None:
        _check_amount(amount)
        self._action_points = min(self.max_action_points, self._action_points + amount)

    def restore_full(self) -> None:
        self._action_points = self.max_action_points

    # ------------------------------------------------------------------
    # Hit points
    # ------------------------------------------------------------------

    @property
    def hit_points(self) -> int:
        return self._hit_points

    def use_hit_points(self, amount: int = 1) -> bool:
        """
        Lose `amount` hit points, flooring at zero.

        Returns True when the character is dead after the loss.
        """
        _check_amount(amount)
        self._hit_points = max(0, self._hit_points - amount)
        return self._hit_points == 0

    def heal_by(self, amount: int = 1) -> None:
        _check_amount(amount)
        self._hit_points = min(self.max_hit_points, self._hit_points + amount)

    def heal_full(self) -> None:
        self._hit_points = self.max_hit_points

    @property
    def is_dead(self) -> bool:
        return self._hit_points == 0


def _check_amount(amount: int) -> None:
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
