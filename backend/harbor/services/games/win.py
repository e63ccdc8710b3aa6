from typing import Optional

from harbor.models import BASES


def check_win(player: int, x: int, y: int) -> Optional[int]:
    """Return ``player`` if (x, y) is the opponent's base, else None."""
    if (x, y) == BASES[1 - player]:
        return player
    return None
