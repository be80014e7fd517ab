import logging

import pytest

from state import EventBus, SimulationState
from target import Target
from utils import hsl_color, load_config, wrap_hue


def test_spawn_origin_defaults_to_centre():
    state = SimulationState(800, 600)
    assert state.spawn_origin() == (400, 300)
    state.pointer = (12, 34)
    assert state.spawn_origin() == (12, 34)


def test_adjust_hue_wraps_both_ways():
    state = SimulationState(800, 600)
    state.adjust_hue(370)
    assert state.hue == 10
    state.adjust_hue(-20)
    assert state.hue == 350


def test_wrap_hue_repeated_large_steps_stay_in_range():
    hue = 0.0
    for _ in range(100):
        hue = wrap_hue(hue + 370.0)
        assert 0 <= hue <= 360


def test_clear_target_remembers_position():
    state = SimulationState(800, 600)
    state.clear_target()
    assert state.last_target_position is None

    state.target = Target(12.0, 34.0, 0.0)
    state.clear_target()
    assert state.target is None
    assert state.last_target_position == (12.0, 34.0)


def test_update_size():
    state = SimulationState(800, 600)
    state.update_size(1024, 768)
    assert (state.width, state.height) == (1024, 768)


def test_event_bus_delivers_payload_to_every_listener():
    bus = EventBus()
    received = []
    bus.on('particle:create', lambda **payload: received.append(('a', payload)))
    bus.on('particle:create', lambda **payload: received.append(('b', payload)))

    bus.emit('particle:create', count=50, x=1, y=2)

    assert received == [
        ('a', {'count': 50, 'x': 1, 'y': 2}),
        ('b', {'count': 50, 'x': 1, 'y': 2}),
    ]


def test_event_bus_without_listeners_is_a_no_op():
    EventBus().emit('nothing')


def test_hsl_color_is_saturated_mid_lightness():
    assert tuple(hsl_color(0)) == (255, 0, 0, 255)
    assert tuple(hsl_color(120)) == (0, 255, 0, 255)


def test_load_config_warns_about_missing_sections(tmp_path, caplog):
    path = tmp_path / "config.json"
    path.write_text('{"simulation_parameters": {"seed": 7}}')

    with caplog.at_level(logging.WARNING):
        config = load_config(str(path))

    assert config == {"simulation_parameters": {"seed": 7}}
    assert "logging, visualization, run_control" in caplog.text


def test_load_config_rejects_non_object(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('[1, 2, 3]')
    with pytest.raises(ValueError):
        load_config(str(path))
