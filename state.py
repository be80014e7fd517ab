# state.py
"""
Mutable state shared between the input handlers and the simulation tick.

Everything the tick reads or changes lives on a single SimulationState
instance that is passed to it explicitly. The EventBus lets the input side
request particle spawns without knowing about the particle pool.
"""
import logging
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Tuple

from utils import wrap_hue


class Score:
    def __init__(self):
        self.eaten = 0
        self.lost = 0

    def __repr__(self):
        return f"Score(eaten={self.eaten}, lost={self.lost})"


class SimulationState:
    """
    Aggregate state of one running simulation.

    Attributes:
        particles: Active particles, in spawn order.
        score: Captured (eaten) and exploded (lost) target counters.
        hue: Hue in degrees given to newly spawned particles.
        target: The live target, or None when absent.
        pointer: Last known pointer position, or None before any input.
        width, height: Viewport size in pixels.
        is_paused: When set, ticks leave everything untouched.
        last_target_position: Where the previous target was, used to place
            the next one in the opposite quadrant.
    """
    def __init__(self, width: float, height: float):
        self.particles = []
        self.score = Score()
        self.hue = 0.0
        self.target = None
        self.pointer: Optional[Tuple[float, float]] = None
        self.width = width
        self.height = height
        self.is_paused = False
        self.last_target_position: Optional[Tuple[float, float]] = None

    def update_size(self, width: float, height: float):
        self.width = width
        self.height = height

    def spawn_origin(self) -> Tuple[float, float]:
        """Pointer position, or the viewport centre before the first input."""
        if self.pointer is None:
            return (self.width / 2, self.height / 2)
        return self.pointer

    def adjust_hue(self, amount: float):
        self.hue = wrap_hue(self.hue + amount)

    def clear_target(self):
        if self.target is not None:
            self.last_target_position = (self.target.x, self.target.y)
        self.target = None


class EventBus:
    """
    A minimal publish/subscribe hub keyed by event name.
    """
    def __init__(self):
        self._listeners: Dict[str, List[Callable]] = defaultdict(list)

    def on(self, event: str, listener: Callable):
        self._listeners[event].append(listener)

    def emit(self, event: str, **payload):
        listeners = self._listeners.get(event, [])
        if not listeners:
            logging.debug(f"Event '{event}' emitted with no listeners.")
        for listener in listeners:
            listener(**payload)
