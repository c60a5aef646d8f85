"""Rule and session configuration.

Both configs can be built from environment variables so the server
entry point (main.py) can pass options through to api.py the same way
it passes everything else: by setting the environment before uvicorn
imports the app.
"""

import os
from dataclasses import dataclass
from typing import Optional

from .board import Side

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class RuleConfig:
    """Optional rules layered on top of the basic movement rules.

    Attributes:
        enforce_general_safety: Drop moves that leave the mover's General
            capturable on the opponent's next ply.
        palace_diagonals: Enable movement along the palace X lines for
            Chariot, Cannon and Soldier, and restrict Guard/General
            diagonal steps to those lines.
    """

    enforce_general_safety: bool = False
    palace_diagonals: bool = False

    @classmethod
    def from_env(cls) -> "RuleConfig":
        return cls(
            enforce_general_safety=_env_bool("JANGGI_ENFORCE_GENERAL_SAFETY", False),
            palace_diagonals=_env_bool("JANGGI_PALACE_DIAGONALS", False),
        )


DEFAULT_RULES = RuleConfig()


@dataclass(frozen=True)
class SessionConfig:
    """Game session defaults.

    Attributes:
        first_side: Side that makes the first move.
        autoplay_delay: Seconds to yield between plies during autoplay.
        max_plies: Ply count after which the game is declared a draw
            (None for no limit).
        strategy: Name of the default AI move strategy.
    """

    first_side: Side = Side.CHO
    autoplay_delay: float = 0.05
    max_plies: Optional[int] = 400
    strategy: str = "random"

    @classmethod
    def from_env(cls) -> "SessionConfig":
        first_side = os.environ.get("JANGGI_FIRST_SIDE", "CHO").strip().upper()
        max_plies = int(os.environ.get("JANGGI_MAX_PLIES", "400"))
        return cls(
            first_side=Side(first_side),
            autoplay_delay=float(os.environ.get("JANGGI_AUTOPLAY_DELAY", "0.05")),
            max_plies=max_plies if max_plies > 0 else None,
            strategy=os.environ.get("JANGGI_STRATEGY", "random"),
        )
