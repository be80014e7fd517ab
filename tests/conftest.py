import numpy as np
import pytest

from simulation import Simulation
from state import SimulationState


class RecordingCanvas:
    """Stands in for the pygame canvas and records every draw call."""
    def __init__(self):
        self.calls = []

    def clear(self):
        self.calls.append(('clear',))

    def fill_circle(self, center, radius, color, glow=0):
        self.calls.append(('circle', center, radius, color, glow))

    def line(self, start, end, color, width):
        self.calls.append(('line', start, end, color, width))

    def text_width(self, text):
        return len(text) * 10

    def text(self, text, bottom_left, fill, outline):
        self.calls.append(('text', text, bottom_left, fill, outline))

    def present(self):
        self.calls.append(('present',))

    def of(self, kind):
        return [call for call in self.calls if call[0] == kind]


@pytest.fixture
def canvas():
    return RecordingCanvas()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def state():
    return SimulationState(800, 600)


@pytest.fixture
def sim():
    return Simulation({'seed': 42, 'pool_capacity': 500, 'render_mode': 'basic'})
