import pytest

from state import SimulationState
from target import Target, TargetEvent, advance_target, in_hud_zone, quadrant_index

WIDTH, HEIGHT = 800, 600


class BurstRecorder:
    def __init__(self):
        self.bursts = []

    def __call__(self, x, y):
        self.bursts.append((x, y))


def test_quadrant_index_values():
    assert quadrant_index(10, 10, WIDTH, HEIGHT) == 0
    assert quadrant_index(500, 10, WIDTH, HEIGHT) == 1
    assert quadrant_index(10, 500, WIDTH, HEIGHT) == 1
    assert quadrant_index(500, 500, WIDTH, HEIGHT) == 2


@pytest.mark.parametrize("previous, expected", [
    ((10, 10), 2),
    ((500, 10), 3),
    ((500, 500), 0),
])
def test_spawn_uses_diagonal_quadrant(rng, previous, expected):
    q = quadrant_index(previous[0], previous[1], WIDTH, HEIGHT)
    assert expected == (q + 2) % 4

    offset_x = (expected % 2) * WIDTH / 2
    offset_y = (expected // 2) * HEIGHT / 2
    for _ in range(200):
        target = Target.spawn(rng, WIDTH, HEIGHT, previous)
        assert target.quadrant == expected
        assert offset_x <= target.x <= offset_x + WIDTH / 2
        assert offset_y <= target.y <= offset_y + HEIGHT / 2


def test_spawn_avoids_hud_zone(rng):
    # Previous target top-right -> new target in the bottom-right quadrant.
    for _ in range(500):
        target = Target.spawn(rng, WIDTH, HEIGHT, (500, 10))
        assert not in_hud_zone(target.x, target.y, WIDTH, HEIGHT)


def test_spawn_returns_when_quadrant_is_all_hud(rng):
    # 500x100: the bottom-right quadrant sits entirely under the HUD.
    for _ in range(20):
        target = Target.spawn(rng, 500, 100, (400, 10))
        assert target.quadrant == 3
        assert not in_hud_zone(target.x, target.y, 500, 100)
        assert 250 <= target.x <= 500
        assert target.y == 40


def test_zero_sized_viewport_keeps_target_absent(rng):
    state = SimulationState(0, 0)
    burst = BurstRecorder()

    assert advance_target(state, burst, rng) is TargetEvent.ABSENT
    assert state.target is None
    assert burst.bursts == []

    state.update_size(WIDTH, HEIGHT)
    assert advance_target(state, burst, rng) is TargetEvent.SPAWNED


def test_first_spawn_without_previous(rng):
    target = Target.spawn(rng, WIDTH, HEIGHT)
    assert 0 <= target.x <= WIDTH
    assert 0 <= target.y <= HEIGHT
    assert target.size == 20.0
    assert 0 <= target.hue < 360


def test_contains_is_radial():
    target = Target(100.0, 100.0, 0.0)
    assert target.contains((100.0, 100.0))
    assert target.contains((120.0, 100.0))
    # Inside the bounding box corner, outside the circle.
    assert not target.contains((115.0, 115.0))
    assert not target.contains(None)


def test_absent_target_spawns_and_sets_hue(state, rng, canvas):
    burst = BurstRecorder()
    event = advance_target(state, burst, rng)

    assert event is TargetEvent.SPAWNED
    assert state.target is not None
    assert state.hue == int(state.target.hue)
    assert burst.bursts == []


def test_capture_scores_and_clears(state, rng):
    state.target = Target(300.0, 200.0, 10.0)
    state.pointer = (305.0, 200.0)
    burst = BurstRecorder()

    event = advance_target(state, burst, rng)

    assert event is TargetEvent.CAPTURED
    assert state.score.eaten == 1
    assert state.score.lost == 0
    assert state.target is None
    assert state.last_target_position == (300.0, 200.0)
    assert burst.bursts == []


def test_threshold_crossing_explodes_once(state, rng):
    state.target = Target(300.0, 200.0, 10.0)
    state.target.size = 0.31
    burst = BurstRecorder()

    assert advance_target(state, burst, rng) is TargetEvent.ACTIVE
    assert state.target.size == pytest.approx(0.21)

    assert advance_target(state, burst, rng) is TargetEvent.EXPIRED_EXPLODE
    assert state.score.lost == 1
    assert state.score.eaten == 0
    assert state.target is None
    assert burst.bursts == [(300.0, 200.0)]


def test_expiry_at_zero_is_quiet(state, rng):
    state.target = Target(300.0, 200.0, 10.0)
    state.target.size = 0.0
    burst = BurstRecorder()

    assert advance_target(state, burst, rng) is TargetEvent.EXPIRED_QUIET
    assert state.score.lost == 0
    assert state.target is None
    assert burst.bursts == []


def test_capture_takes_priority_over_expiry(state, rng):
    state.target = Target(300.0, 200.0, 10.0)
    state.target.size = 0.25
    state.pointer = (300.0, 200.0)
    burst = BurstRecorder()

    assert advance_target(state, burst, rng) is TargetEvent.CAPTURED
    assert state.score.eaten == 1
    assert state.score.lost == 0
    assert burst.bursts == []


def test_next_target_lands_opposite_previous(state, rng):
    state.target = Target(100.0, 100.0, 10.0)
    state.pointer = (100.0, 100.0)
    advance_target(state, BurstRecorder(), rng)

    state.pointer = None
    assert advance_target(state, BurstRecorder(), rng) is TargetEvent.SPAWNED
    assert state.target.quadrant == (quadrant_index(100.0, 100.0, WIDTH, HEIGHT) + 2) % 4
