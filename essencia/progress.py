"""Progress bar zone calculation."""

from .constants import ZONE_GREEN, ZONE_RED, ZONE_YELLOW
from .models import ProgressBar

# Each zone fills one third of the bar
RED_ZONE_LIMIT = 50.0
YELLOW_ZONE_LIMIT = 100.0
GREEN_ZONE_LIMIT = 150.0


def compute_progress_bar(percentage: float) -> ProgressBar:
    """
    Map a goal percentage to a colour zone and a 0-100 visual fill.

    Zones (lower bound inclusive):
    - 0-50%    -> red,    fill 0-33.33
    - 50-100%  -> yellow, fill 33.33-66.66
    - 100-150% -> green,  fill 66.66-100 (anything past 150% fills the bar)

    The displayed percentage is never clamped.

    Args:
        percentage: Sanitized goal percentage (>= 0)

    Returns:
        ProgressBar with displayed percentage, colour and fill
    """
    displayed = round(percentage, 2)

    if displayed <= RED_ZONE_LIMIT:
        color = ZONE_RED
        fill = max(0.0, (displayed / 50) * 33.33)
    elif displayed <= YELLOW_ZONE_LIMIT:
        color = ZONE_YELLOW
        fill = 33.33 + ((displayed - 50) / 50) * 33.33
    else:
        color = ZONE_GREEN
        fill = 66.66 + ((min(displayed, GREEN_ZONE_LIMIT) - 100) / 50) * 33.34
        fill = min(fill, 100.0)

    return ProgressBar(percentage=displayed, color=color, fill_percentage=round(fill, 2))
