"""
Totals calculator - maps raw activity counters to weighted point totals
"""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Mapping

from app.constants import (
    ATTENDEES_WEIGHT,
    DROPPED_LINKS_WEIGHT,
    RECRUITS_WEIGHT,
    NICKNAMES_SET_WEIGHT,
    GAME_HANDLED_WEIGHT,
)
from app.models.log_entry import COUNTER_FIELDS


@dataclass(frozen=True)
class Totals:
    attendees_total: int = 0
    dropped_links_total: int = 0
    recruits_total: int = 0
    nicknames_set_total: int = 0
    game_handled_total: int = 0

    @property
    def grand_total(self) -> int:
        return (
            self.attendees_total
            + self.dropped_links_total
            + self.recruits_total
            + self.nicknames_set_total
            + self.game_handled_total
        )

    def as_dict(self, include_grand_total: bool = False) -> Dict[str, int]:
        data = asdict(self)
        if include_grand_total:
            data["grand_total"] = self.grand_total
        return data


def coerce_counter(value: Any) -> int:
    """
    Coerce a submitted counter to a non-negative integer.

    None, blank strings, non-numeric input and negative numbers all become 0.
    Fractional values are truncated toward zero.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return max(int(value), 0)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
        return coerce_counter(number)
    return 0


def compute_totals(raw: Mapping[str, Any]) -> Totals:
    """
    Compute the five weighted totals from raw counters.

    Args:
        raw: Mapping with any of the counter fields; missing ones count as 0

    Returns:
        Totals for the given counters
    """
    counters = {field: coerce_counter(raw.get(field)) for field in COUNTER_FIELDS}
    return Totals(
        attendees_total=(counters["attendees_batch1"] + counters["attendees_batch2"]) * ATTENDEES_WEIGHT,
        dropped_links_total=counters["dropped_links"] * DROPPED_LINKS_WEIGHT,
        recruits_total=counters["recruits"] * RECRUITS_WEIGHT,
        nicknames_set_total=counters["nicknames_set"] * NICKNAMES_SET_WEIGHT,
        game_handled_total=counters["game_handled"] * GAME_HANDLED_WEIGHT,
    )
