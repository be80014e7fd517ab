# target.py
"""
The apple target and the state machine that drives it.

A single target at a time shrinks a little every frame. It can be captured
by moving the pointer onto it, or it expires once it has shrunk past a small
threshold, bursting into particles on the frame it crosses that threshold.
Each new target is placed in the quadrant diagonally opposite the previous
one, away from the HUD text in the bottom-right corner.
"""
import logging
import math
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from constants import (
    TARGET_START_SIZE, TARGET_DECAY, TARGET_EXPIRE_SIZE, TARGET_PLACEMENT_ATTEMPTS,
    HUD_RESERVED_WIDTH, TEXT_HEIGHT
)
from utils import hsl_color

# --- Data Contracts ---
#
# quadrant_index(x, y, width, height) -> int:
#   - Outputs: floor(x / (width/2)) + floor(y / (height/2)). For points on
#     screen this is 0, 1 or 2; the top-right and bottom-left quadrants
#     share the value 1.
#
# Target.spawn(rng, width, height, previous) -> Target:
#   - Inputs:
#     - previous: (x, y) of the last target, or None for the first one.
#   - Invariants: The new target lies in quadrant (q + 2) % 4 of the
#     previous position, and never inside the bottom-right HUD zone
#     (300 x 60 px). When that quadrant is wholly covered by the zone,
#     the target is lifted to the zone's top edge instead, so spawning
#     always returns after a bounded number of samples.
#
# advance_target with a zero-sized viewport returns ABSENT and spawns
# nothing.
#
# advance_target(state, spawn_burst, rng) -> TargetEvent:
#   - Side Effects: May spawn, clear or shrink state.target, change
#     state.hue, and increment state.score. spawn_burst(x, y) is called
#     only on an explosion.


class TargetEvent(Enum):
    """What happened to the target on a single tick."""
    ABSENT = "absent"
    SPAWNED = "spawned"
    ACTIVE = "active"
    CAPTURED = "captured"
    EXPIRED_QUIET = "expired_quiet"
    EXPIRED_EXPLODE = "expired_explode"


def quadrant_index(x: float, y: float, width: float, height: float) -> int:
    return math.floor(x / (width / 2)) + math.floor(y / (height / 2))


def in_hud_zone(x: float, y: float, width: float, height: float) -> bool:
    return x > width - HUD_RESERVED_WIDTH and y > height - TEXT_HEIGHT


class Target:
    """
    A shrinking circular target (the "apple").
    """
    def __init__(self, x: float, y: float, hue: float, quadrant: int = 0):
        self.x = x
        self.y = y
        self.size = TARGET_START_SIZE
        self.hue = hue
        self.color = hsl_color(hue)
        self.quadrant = quadrant

    @classmethod
    def spawn(
        cls,
        rng: np.random.Generator,
        width: float,
        height: float,
        previous: Optional[Tuple[float, float]] = None
    ) -> "Target":
        if previous is None:
            previous = (rng.uniform(0, width), rng.uniform(0, height))

        half_w, half_h = width / 2, height / 2
        old_quadrant = quadrant_index(previous[0], previous[1], width, height)
        new_quadrant = (old_quadrant + 2) % 4

        offset_x = (new_quadrant % 2) * half_w
        offset_y = (new_quadrant // 2) * half_h
        for _ in range(TARGET_PLACEMENT_ATTEMPTS):
            x = float(rng.uniform(0, half_w)) + offset_x
            y = float(rng.uniform(0, half_h)) + offset_y
            if not in_hud_zone(x, y, width, height):
                break
        else:
            # The quadrant lies entirely under the HUD; lift the target above it.
            y = max(min(y, height - TEXT_HEIGHT), 0.0)
            logging.debug(f"No free spot in quadrant {new_quadrant} of a {width}x{height} viewport.")

        return cls(x, y, float(rng.uniform(0, 360)), new_quadrant)

    def contains(self, point: Optional[Tuple[float, float]]) -> bool:
        """Radial capture test: the point lies within the target's radius."""
        if point is None:
            return False
        return math.hypot(point[0] - self.x, point[1] - self.y) <= self.size

    def update(self):
        self.size -= TARGET_DECAY

    def draw(self, canvas):
        canvas.fill_circle((self.x, self.y), self.size, self.color)


def advance_target(state, spawn_burst, rng: np.random.Generator) -> TargetEvent:
    """
    Runs one tick of the target state machine.

    Transitions are checked in a fixed order and at most one fires:
    spawn when absent, capture, expiry, and otherwise shrink.
    """
    target = state.target

    if target is None:
        if state.width <= 0 or state.height <= 0:
            # Minimised window: nowhere to place a target until it is restored.
            return TargetEvent.ABSENT
        target = Target.spawn(rng, state.width, state.height, state.last_target_position)
        state.target = target
        state.hue = int(target.hue)
        logging.debug(
            f"Target spawned at ({target.x:.1f}, {target.y:.1f}) "
            f"in quadrant {target.quadrant}."
        )
        return TargetEvent.SPAWNED

    if target.contains(state.pointer):
        state.score.eaten += 1
        state.clear_target()
        logging.info(f"Target captured. Eaten: {state.score.eaten}, Lost: {state.score.lost}")
        return TargetEvent.CAPTURED

    if target.size <= TARGET_EXPIRE_SIZE:
        state.clear_target()
        if target.size > 0:
            spawn_burst(target.x, target.y)
            state.score.lost += 1
            logging.info(f"Target exploded. Eaten: {state.score.eaten}, Lost: {state.score.lost}")
            return TargetEvent.EXPIRED_EXPLODE
        logging.debug("Target expired without exploding.")
        return TargetEvent.EXPIRED_QUIET

    target.update()
    return TargetEvent.ACTIVE
