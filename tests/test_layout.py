import random

import pytest

from fleet_overlay import config as C
from fleet_overlay.core.layout import layout, place_segment, trajectories_intersect
from fleet_overlay.core.models import PathSegment, Pose2D, Trajectory

from conftest import knot, straight


def test_crossing_pair_is_stacked():
    a = straight(1, (0.0, 0.0), (10.0, 0.0))
    b = straight(2, (0.0, 10.0), (10.0, -10.0))
    assert trajectories_intersect(a, b)

    out = layout([a, b], conflicts=[[1, 2]])
    assert [(x.trajectory_id, x.height_level, x.is_conflicting) for x in out] == [
        (1, 0, True),
        (2, 1, True),
    ]


def test_disjoint_paths_share_level_zero():
    a = straight(1, (0.0, 0.0), (10.0, 0.0))
    b = straight(2, (0.0, 5.0), (10.0, 5.0))
    out = layout([b, a])
    assert [x.trajectory_id for x in out] == [1, 2]
    assert [x.height_level for x in out] == [0, 0]
    assert not any(x.is_conflicting for x in out)


def test_lowest_free_level_is_reused():
    a = straight(1, (0.0, 0.0), (10.0, 0.0))
    b = straight(2, (5.0, -5.0), (5.0, 5.0))     # crosses a
    c = straight(3, (7.0, -5.0), (7.0, 5.0))     # crosses a, not b
    d = straight(4, (0.0, 3.0), (10.0, 3.0))     # crosses b and c
    levels = {x.trajectory_id: x.height_level for x in layout([a, b, c, d])}
    assert levels == {1: 0, 2: 1, 3: 1, 4: 0}


def test_unknown_conflict_ids_are_ignored():
    a = straight(1, (0.0, 0.0), (1.0, 0.0))
    out = layout([a], conflicts=[[1, 99], [42, 43]])
    assert out[0].is_conflicting


def test_undrawable_trajectories_are_excluded():
    a = straight(1, (0.0, 0.0), (1.0, 0.0))
    lone = Trajectory(id=2, robot_name="r", knots=(knot(0, 0.0, 0.0),))
    assert [x.trajectory_id for x in layout([a, lone], [[2, 1]])] == [1]


def _random_batch(rng, n):
    out = []
    for tid in rng.sample(range(100), n):
        count = rng.randint(2, 5)
        knots = tuple(
            knot(i * 1000, rng.uniform(0, 20), rng.uniform(0, 20)) for i in range(count)
        )
        out.append(Trajectory(id=tid, robot_name=f"r{tid}", knots=knots))
    return out


def test_same_level_never_overlaps():
    rng = random.Random(1234)
    for _ in range(40):
        batch = _random_batch(rng, rng.randint(1, 10))
        by_id = {t.id: t for t in batch}
        out = layout(batch)
        assert len(out) == len(batch)
        for i, x in enumerate(out):
            assert 0 <= x.height_level < len(batch)
            for y in out[i + 1:]:
                if x.height_level == y.height_level:
                    assert not trajectories_intersect(by_id[x.trajectory_id], by_id[y.trajectory_id])


def test_layout_is_deterministic():
    rng = random.Random(99)
    batch = _random_batch(rng, 8)
    conflicts = [[batch[0].id, batch[1].id]]
    first = layout(batch, conflicts)
    assert layout(list(batch), conflicts) == first
    assert layout(list(reversed(batch)), conflicts) == first


def test_place_segment_box():
    seg = PathSegment(start=Pose2D(0.0, 0.0, 0.0), end=Pose2D(0.0, 4.0, 0.0))
    placed = place_segment(seg, level=2)
    assert placed.midpoint == pytest.approx((0.0, 2.0))
    assert placed.length == pytest.approx(4.0)
    assert placed.heading == pytest.approx(1.5707963, rel=1e-6)
    assert placed.z == pytest.approx(C.TRAJ_Z_OFFSET + 2 * C.TRAJ_HEIGHT_LEVEL_STEP)
    assert placed.width == C.TRAJ_PATH_SIZE


def test_level_cap_falls_back_to_top_level(caplog):
    a = straight(1, (0.0, 0.0), (10.0, 0.0))
    b = straight(2, (5.0, -5.0), (5.0, 5.0))
    c = straight(3, (0.0, -5.0), (10.0, 5.0))    # crosses a and b

    with caplog.at_level("WARNING", logger="fleet_overlay.core.layout"):
        out = layout([a, b, c], max_level=1)
    assert [x.height_level for x in out] == [0, 1, 1]
    assert "top level 1" in caplog.text

    # uncapped, every crossing trajectory gets its own level
    assert [x.height_level for x in layout([a, b, c])] == [0, 1, 2]
