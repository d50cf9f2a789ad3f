"""
Signal damping through a response spline.

A SignalDamper maps each raw sample (e.g. an ambient light estimate) through a
CubicSpline and tells its observers when the damped value moves. The spline
itself knows nothing about observers.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional

from .spline import CubicSpline

logger = logging.getLogger(__name__)

Observer = Callable[[float, float], None]

# Response curve of the light-intensity demo: (raw, damped)
LIGHT_RESPONSE_SAMPLES = ((0.1, 0.3), (0.4, 0.6), (1.0, 1.0), (2.0, 1.6), (2.5, 2.0))


def light_response_spline() -> CubicSpline:
    """Response curve used to damp light intensity, flat at both ends."""
    # Unevenly spaced on purpose; the curve only needs to be C1
    return CubicSpline.from_samples(
        LIGHT_RESPONSE_SAMPLES, tangent_at_start=0.0, tangent_at_end=0.0, check_spacing=False
    )


class SignalDamper:
    """
    Feed raw samples through a spline and notify observers on change.

    Args:
        spline: Response curve mapping raw to damped values
        threshold: Minimum absolute change of the damped value that triggers a
            notification. The first update always notifies.

    Example:
        >>> damper = SignalDamper(light_response_spline())
        >>> unsubscribe = damper.subscribe(lambda damped, raw: print(damped))
        >>> damper.update(1.0)
        1.0
    """

    def __init__(self, spline: CubicSpline, threshold: float = 0.0) -> None:
        if threshold < 0:
            raise ValueError(f"threshold must be non-negative, got {threshold}")
        self.spline = spline
        self.threshold = threshold
        self._value: Optional[float] = None
        self._observers: List[Observer] = []

    @property
    def value(self) -> Optional[float]:
        """Last damped value, None before the first update."""
        return self._value

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer(damped, raw)``; returns a function that removes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def update(self, raw: float) -> float:
        """
        Damp one raw sample and notify observers if the result moved.

        Raises:
            ValueError: ``raw`` is NaN or infinite; the last damped value is kept
        """
        raw = float(raw)
        if not math.isfinite(raw):
            raise ValueError(f"raw sample must be finite, got {raw}")
        damped = self.spline.evaluate(raw)
        previous = self._value
        self._value = damped
        if previous is None or abs(damped - previous) > self.threshold:
            logger.debug("damped value %s -> %s (raw %s)", previous, damped, raw)
            for observer in list(self._observers):
                observer(damped, raw)
        return damped
