# simulation.py
"""
Handles the per-frame simulation logic.

This module defines the Simulation class, which advances a SimulationState
by one frame: it moves, draws and prunes particles, joins nearby particles
with lines using a uniform spatial grid, runs the apple target's state
machine and draws the HUD. It also translates input events (click, pointer
move, wheel, resize) into state changes.
"""
import logging
import math
import time
from collections import deque
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np
from numba import jit

from constants import (
    CONNECTION_LINE_WIDTH, TEXT_PADDING, HUD_TEXT_COLOR, HUD_OUTLINE_COLOR,
    HUD_HINT, METRICS_WINDOW
)
from particle import Particle, ParticlePool, RenderMode
from state import EventBus, SimulationState
from target import TargetEvent, advance_target

# --- Data Contracts ---
#
# class SpatialIndex:
#   - rebuild(self, particles: List[Particle]) -> None:
#     - Side Effects: Replaces the cell map with
#       (floor(x / cell_size), floor(y / cell_size)) -> [particles].
#     - Invariants: Rebuilding twice from the same list yields the same cells.
#       Particles are borrowed, never copied.
#
#   - close_pairs(self, max_distance: float) -> Iterator[(Particle, Particle)]:
#     - Outputs: Every unordered pair of live particles that share a cell and
#       lie strictly closer than max_distance. Neighbours on opposite sides of
#       a cell boundary are not reported.
#
# class Simulation:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": int or None
#         - "pool_capacity": int
#         - "burst_count": int
#         - "grid_size": float
#         - "connection_distance": float
#         - "render_mode": "basic" | "glow"
#         - "wheel_hue_factor": float
#
#   - step(self, state: SimulationState, canvas, dt: float = 1.0)
#         -> Optional[TargetEvent]:
#     - Outputs: The target transition of this frame, or None when paused.
#     - Side Effects: Mutates state and issues draw calls against canvas.
#     - Invariants: len(state.particles) <= pool capacity.

@jit(nopython=True)
def _find_close_pairs_numba(positions, max_distance_sq):
    """
    Numba-jitted pair test for the particles of a single grid cell.

    Returns an (M, 2) array of index pairs (i, j), i < j, whose squared
    distance is below max_distance_sq.
    """
    n = positions.shape[0]
    pairs = np.empty((n * (n - 1) // 2, 2), dtype=np.int64)
    count = 0
    for i in range(n):
        for j in range(i + 1, n):
            dx = positions[i, 0] - positions[j, 0]
            dy = positions[i, 1] - positions[j, 1]
            if dx * dx + dy * dy < max_distance_sq:
                pairs[count, 0] = i
                pairs[count, 1] = j
                count += 1
    return pairs[:count]


class SpatialIndex:
    """
    A uniform grid of square cells, rebuilt from scratch every frame.
    """
    def __init__(self, cell_size: float = 100):
        if cell_size <= 0:
            msg = f"Configuration error: grid_size must be positive, got {cell_size}."
            logging.critical(msg)
            raise ValueError(msg)
        self.cell_size = cell_size
        self.cells: Dict[Tuple[int, int], List[Particle]] = {}

    def cell_key(self, x: float, y: float) -> Tuple[int, int]:
        return (math.floor(x / self.cell_size), math.floor(y / self.cell_size))

    def rebuild(self, particles: List[Particle]):
        self.cells = {}
        for particle in particles:
            key = self.cell_key(particle.x, particle.y)
            self.cells.setdefault(key, []).append(particle)

    def close_pairs(self, max_distance: float) -> Iterator[Tuple[Particle, Particle]]:
        max_distance_sq = max_distance * max_distance
        for cell_particles in self.cells.values():
            alive = [p for p in cell_particles if not p.is_dead]
            if len(alive) < 2:
                continue
            positions = np.array([(p.x, p.y) for p in alive], dtype=np.float64)
            for i, j in _find_close_pairs_numba(positions, max_distance_sq):
                yield alive[i], alive[j]


class FrameMetrics:
    """
    Rolling frame-time and particle-count samples over the last few frames.
    """
    def __init__(self, window: int = METRICS_WINDOW, clock=time.perf_counter):
        self.clock = clock
        self.frame_times = deque(maxlen=window)
        self.particle_counts = deque(maxlen=window)
        self.frame_start = 0.0

    def start_frame(self):
        self.frame_start = self.clock()

    def end_frame(self, particle_count: int):
        self.frame_times.append(self.clock() - self.frame_start)
        self.particle_counts.append(particle_count)

    def fps(self) -> int:
        if not self.frame_times:
            return 0
        average = sum(self.frame_times) / len(self.frame_times)
        if average <= 0:
            return 0
        return round(1.0 / average)

    def average_particles(self) -> int:
        if not self.particle_counts:
            return 0
        return round(sum(self.particle_counts) / len(self.particle_counts))


class Simulation:
    """
    Owns the particle pool, the spatial grid and the random source, and
    advances a SimulationState one frame at a time.
    """
    def __init__(self, params: Dict[str, Any]):
        """
        Initializes the simulation machinery.

        Args:
            params (Dict[str, Any]): Simulation parameters from config.
        """
        self.seed = params.get('seed')
        # All randomness (particles and targets) comes from this generator.
        self.rng = np.random.default_rng(self.seed)

        self.pool = ParticlePool(params.get('pool_capacity', 5000), self.rng)
        self.burst_count = params.get('burst_count', 50)
        self.connection_distance = params.get('connection_distance', 100)
        self.wheel_hue_factor = params.get('wheel_hue_factor', 0.1)
        self.index = SpatialIndex(params.get('grid_size', 100))
        self.metrics = FrameMetrics()

        mode_name = params.get('render_mode', 'glow')
        try:
            self.render_mode = RenderMode(mode_name)
        except ValueError:
            msg = (
                f"Configuration error: unknown render_mode '{mode_name}'. "
                f"Expected one of {[m.value for m in RenderMode]}."
            )
            logging.critical(msg)
            raise ValueError(msg)

        self.bus = EventBus()
        self.bus.on('particle:create', self.spawn_particles)

        logging.info("Simulation logic initialized and configuration validated.")
        logging.info(
            f"Spatial grid cell size {self.index.cell_size}px, "
            f"connection distance {self.connection_distance}px, "
            f"render mode '{self.render_mode.value}'."
        )

    # --- Input handling ---

    def spawn_particles(
        self, state: SimulationState, count: int,
        x: Optional[float] = None, y: Optional[float] = None
    ):
        """Draws `count` particles from the pool at (x, y), or the spawn origin."""
        if x is None or y is None:
            x, y = state.spawn_origin()
        for _ in range(count):
            particle = self.pool.get(x, y, state.hue)
            # A recycled slot may still be in the active list.
            if not particle.in_play:
                particle.in_play = True
                state.particles.append(particle)

    def handle_click(self, state: SimulationState, x: float, y: float):
        state.pointer = (x, y)
        self.bus.emit('particle:create', state=state, count=self.burst_count, x=x, y=y)

    def handle_pointer_move(self, state: SimulationState, x: float, y: float):
        state.pointer = (x, y)
        # Each captured target buys one particle of trail behind the pointer.
        if len(state.particles) < state.score.eaten:
            self.bus.emit('particle:create', state=state, count=1, x=x, y=y)

    def handle_wheel(self, state: SimulationState, delta: float):
        state.adjust_hue(delta * self.wheel_hue_factor)

    def handle_resize(self, state: SimulationState, width: float, height: float):
        state.update_size(width, height)
        logging.info(f"Viewport resized to {width}x{height}.")

    def toggle_pause(self, state: SimulationState):
        state.is_paused = not state.is_paused
        logging.info(f"Simulation {'paused' if state.is_paused else 'resumed'}.")

    # --- Frame ---

    def step(self, state: SimulationState, canvas, dt: float = 1.0) -> Optional[TargetEvent]:
        """
        Executes one frame of the simulation.
        """
        if state.is_paused:
            return None

        # 1. Clear the previous frame
        canvas.clear()

        # 2. Bin the current particles into grid cells
        self.index.rebuild(state.particles)

        # 3. Move, draw and prune particles
        bounds = (state.width, state.height)
        survivors = []
        for particle in state.particles:
            particle.update(bounds, dt)
            particle.draw(canvas, self.render_mode)
            if particle.is_dead:
                particle.in_play = False
            else:
                survivors.append(particle)
        state.particles = survivors

        # 4. Join close particles sharing a cell
        self.draw_connections(canvas)

        # 5. Target state machine
        event = advance_target(
            state,
            lambda x, y: self.spawn_particles(state, self.burst_count, x, y),
            self.rng
        )
        if event is TargetEvent.ACTIVE:
            state.target.draw(canvas)

        # 6. HUD
        self.draw_hud(state, canvas)
        return event

    def draw_connections(self, canvas):
        for first, second in self.index.close_pairs(self.connection_distance):
            canvas.line(
                (first.x, first.y), (second.x, second.y),
                first.color, CONNECTION_LINE_WIDTH
            )

    def draw_hud(self, state: SimulationState, canvas):
        """Draws the score, hint and metrics, right-aligned in the bottom-right corner."""
        lines = [
            f"Eaten: {state.score.eaten}; Lost: {state.score.lost}",
            HUD_HINT,
            f"FPS: {self.metrics.fps()}",
            f"Particles: {self.metrics.average_particles()}",
        ]
        outline = state.target.color if state.target is not None else HUD_OUTLINE_COLOR

        for row, text in enumerate(lines):
            x = state.width - canvas.text_width(text) - TEXT_PADDING
            y = state.height - TEXT_PADDING * (len(lines) - row)
            canvas.text(text, (x, y), HUD_TEXT_COLOR, outline)
