# particle.py
"""
Manages the state of individual particles and the pool that recycles them.

This module defines the Particle class, a single decaying point-mass, and
the ParticlePool, a fixed-capacity ring of pre-allocated particles. The pool
never allocates after construction: asking for a particle when every slot is
in use silently recycles the oldest one.
"""
import logging
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from constants import (
    PARTICLE_MIN_START_SIZE, PARTICLE_MAX_START_SIZE, PARTICLE_SPEED_RANGE,
    PARTICLE_DAMPING, PARTICLE_GRAVITY, PARTICLE_DECAY, PARTICLE_MIN_SIZE,
    PARTICLE_DEATH_SIZE, PARTICLE_GLOW_RADIUS
)
from utils import hsl_color

# --- Data Contracts ---
#
# class Particle:
#   - reset(self, x: float, y: float, hue: float) -> None:
#     - Side Effects: Overwrites every field. Size is sampled from [1, 6],
#       the speed bias from [-1.5, 1.5] on each axis.
#
#   - update(self, bounds: Tuple[float, float], dt: float = 1.0) -> None:
#     - Inputs: bounds is the (width, height) of the viewport. dt is measured
#       in display frames.
#     - Invariants: size never increases and never goes negative. A particle
#       that ends the update outside the viewport has size <= 0.2, which is
#       below the death threshold.
#
# class ParticlePool:
#   - get(self, x: float, y: float, hue: float) -> Particle:
#     - Outputs: The particle in the slot under the cursor, freshly reset.
#     - Invariants: O(1), always succeeds, never allocates.


class RenderMode(Enum):
    """How a particle is drawn onto the canvas."""
    BASIC = "basic"
    GLOW = "glow"


class Particle:
    """
    A single decaying particle integrated with a Verlet-style step.

    Velocity is never stored; it is recovered each frame from the difference
    between the current and previous positions.
    """
    __slots__ = (
        'rng', 'x', 'y', 'prev_x', 'prev_y', 'size',
        'speed_x', 'speed_y', 'hue', 'color', 'in_play'
    )

    def __init__(self, rng: np.random.Generator):
        self.rng = rng
        # Set when the simulation adds the particle to its active list.
        self.in_play = False
        self.reset(0.0, 0.0, 0.0)

    def reset(self, x: float, y: float, hue: float):
        self.x = float(x)
        self.y = float(y)
        self.prev_x = self.x
        self.prev_y = self.y
        self.size = float(self.rng.uniform(PARTICLE_MIN_START_SIZE, PARTICLE_MAX_START_SIZE))
        self.speed_x = float(self.rng.uniform(-PARTICLE_SPEED_RANGE, PARTICLE_SPEED_RANGE))
        self.speed_y = float(self.rng.uniform(-PARTICLE_SPEED_RANGE, PARTICLE_SPEED_RANGE))
        self.hue = hue
        self.color = hsl_color(hue)

    @property
    def is_dead(self) -> bool:
        return self.size <= PARTICLE_DEATH_SIZE

    def update(self, bounds: Tuple[float, float], dt: float = 1.0):
        """
        Advances the particle by one step.

        v = (pos - prev_pos) * damping
        prev_pos = pos
        pos = pos + v + speed_bias (+ gravity on the vertical axis)
        """
        velocity_x = (self.x - self.prev_x) * PARTICLE_DAMPING
        velocity_y = (self.y - self.prev_y) * PARTICLE_DAMPING

        self.prev_x = self.x
        self.prev_y = self.y

        self.x += velocity_x + self.speed_x * dt
        self.y += velocity_y + (self.speed_y + PARTICLE_GRAVITY) * dt

        if self.size > PARTICLE_MIN_SIZE:
            self.size = max(self.size - PARTICLE_DECAY * dt, 0.0)

        width, height = bounds
        if self.x < 0 or self.x > width or self.y < 0 or self.y > height:
            self.size = min(self.size, PARTICLE_MIN_SIZE)

    def draw(self, canvas, mode: RenderMode = RenderMode.BASIC):
        """Draws the particle as a filled circle, with a halo in GLOW mode."""
        if mode is RenderMode.GLOW:
            canvas.fill_circle((self.x, self.y), self.size, self.color, glow=PARTICLE_GLOW_RADIUS)
        else:
            canvas.fill_circle((self.x, self.y), self.size, self.color)


class ParticlePool:
    """
    A fixed ring buffer of pre-allocated particles.
    """
    def __init__(self, capacity: int, rng: Optional[np.random.Generator] = None):
        """
        Args:
            capacity (int): Maximum number of particles alive at once.
            rng (np.random.Generator): Source of randomness shared by every
                particle in the pool.
        """
        if capacity <= 0:
            msg = f"Configuration error: pool capacity must be positive, got {capacity}."
            logging.critical(msg)
            raise ValueError(msg)

        self.rng = rng if rng is not None else np.random.default_rng()
        self.particles = [Particle(self.rng) for _ in range(capacity)]
        self.index = 0

        logging.info(f"ParticlePool initialized with {capacity} pre-allocated particles.")

    @property
    def capacity(self) -> int:
        return len(self.particles)

    def get(self, x: float, y: float, hue: float) -> Particle:
        particle = self.particles[self.index]
        self.index = (self.index + 1) % len(self.particles)
        particle.reset(x, y, hue)
        return particle
