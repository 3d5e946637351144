"""Relative-lag classification and display ordering.

Pure functions over a registry snapshot. A timer is "behind" when some
peer has accumulated at least ``amber`` (five minutes) or ``red`` (ten
minutes) more time. Running state is a separate axis: a running timer is
still classified for lag, but its active colour wins when rendering.
"""

from enum import Enum
from typing import Dict, List, Sequence

from .formatting import format_time, to_tenths


AMBER_THRESHOLD_SEC = 300
RED_THRESHOLD_SEC = 600

ACTIVE_COLOR = '#d0ebff'
RED_COLOR = '#FF6347'
AMBER_COLOR = '#F5CA88'
ON_PACE_COLOR = '#fff'


class Lag(Enum):
    ON_PACE = 'on_pace'
    BEHIND_5 = 'behind_5'
    BEHIND_10 = 'behind_10'


_LAG_COLORS = {
    Lag.ON_PACE: ON_PACE_COLOR,
    Lag.BEHIND_5: AMBER_COLOR,
    Lag.BEHIND_10: RED_COLOR,
}


class Classification:
    __slots__ = ('active', 'lag')

    def __init__(self, active: bool = False, lag: Lag = Lag.ON_PACE):
        self.active = active
        self.lag = lag

    @property
    def color(self) -> str:
        if self.active:
            return ACTIVE_COLOR
        return _LAG_COLORS[self.lag]

    def __eq__(self, other):
        if not isinstance(other, Classification):
            return NotImplemented
        return self.active == other.active and self.lag == other.lag

    def __repr__(self):
        return f"Classification(active={self.active}, lag={self.lag.name})"


def classify(timers: Sequence, amber: float = AMBER_THRESHOLD_SEC, red: float = RED_THRESHOLD_SEC) -> Dict[str, Classification]:
    # Gaps are compared in displayed tenths so tick drift cannot hide a threshold
    tenths = {t.id: to_tenths(t.elapsed) for t in timers}
    red_tenths = int(round(red * 10))
    amber_tenths = int(round(amber * 10))
    result = {}
    for timer in timers:
        lag = Lag.ON_PACE
        for peer in timers:
            if peer.id == timer.id:
                continue
            gap = tenths[peer.id] - tenths[timer.id]
            if gap <= 0:
                continue
            if gap >= red_tenths:
                lag = Lag.BEHIND_10
                break
            if gap >= amber_tenths:
                lag = Lag.BEHIND_5
        result[timer.id] = Classification(active=timer.running, lag=lag)
    return result


def order(timers: Sequence, classifications: Dict[str, Classification]) -> List:
    """Running first, then ten-minutes-behind, otherwise creation order."""
    ranked = sorted(
        enumerate(timers),
        key=lambda item: (
            not item[1].running,
            classifications[item[1].id].lag is not Lag.BEHIND_10,
            item[0],
        ),
    )
    return [timer for _, timer in ranked]


def board(timers: Sequence, amber: float = AMBER_THRESHOLD_SEC, red: float = RED_THRESHOLD_SEC) -> dict:
    """Rendering payload: ordered rows plus where the running block ends."""
    classifications = classify(timers, amber=amber, red=red)
    rows = []
    for timer in order(timers, classifications):
        c = classifications[timer.id]
        row = timer.to_dict()
        row.update({
            'display': format_time(timer.elapsed),
            'lag': c.lag.value,
            'active': c.active,
            'color': c.color,
        })
        rows.append(row)
    return {
        'timers': rows,
        'separator_index': sum(1 for t in timers if t.running),
    }
