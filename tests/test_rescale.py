import logging

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from partkit import (
    Assembly,
    PartkitSettings,
    rescale_attachments,
    rescale_part,
    reset_settings,
    set_settings,
)
from partkit.rescale import MOVED_NEIGHBOR, MOVED_SELF


@pytest.fixture(autouse=True)
def _default_settings():
    reset_settings()
    yield
    reset_settings()


def _child_setup(rotation=None):
    assembly = Assembly("vessel")
    part = assembly.add_part("body", rotation=rotation)
    part.add_attach_point("side", (1, 0, 0))
    child = assembly.add_part("wheel", position=part.transform.transform_point((1, 0, 0)))
    assembly.attach(child, part, parent_point="side")
    return assembly, part, child


def _parent_setup():
    assembly = Assembly("vessel")
    root = assembly.add_part("root")
    root.add_attach_point("top", (0, 1, 0))
    part = assembly.add_part("body", position=(0, 2, 0))
    part.add_attach_point("bottom", (0, -1, 0))
    assembly.attach(part, root, parent_point="top", child_point="bottom")
    return assembly, root, part


def _joint_gap(first, first_point, second, second_point):
    a = first.transform.transform_point(first.find_attach_point(first_point).position)
    b = second.transform.transform_point(second.find_attach_point(second_point).position)
    return a - b


def test_point_positions_scale_proportionally():
    assembly = Assembly()
    part = assembly.add_part("body")
    point = part.add_attach_point("side", (2, 0, 0))

    rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=False)
    np.testing.assert_array_equal(point.position, [4.0, 0.0, 0.0])

    rescale_attachments(assembly, part, 2.0, 1.0, user_initiated=False)
    np.testing.assert_array_equal(point.position, [2.0, 0.0, 0.0])


def test_baseline_tracks_position_after_every_rescale():
    assembly = Assembly()
    part = assembly.add_part("body")
    part.set_surface_point((0, 0, -0.3))
    part.add_attach_point("top", (0, 0.7, 0))
    part.add_attach_point("bottom", (0, -0.7, 0.1))

    for previous, new in ((1.0, 1.7), (1.7, 0.3), (0.3, 3.0)):
        rescale_attachments(assembly, part, previous, new, user_initiated=True)
        for point in part.all_attach_points():
            np.testing.assert_array_equal(point.position, point.original_position)
            assert point.position is not point.original_position


def test_same_scale_twice_changes_nothing():
    assembly, part, child = _child_setup(Rotation.from_euler("xyz", [10, 20, 30], degrees=True))
    part.set_surface_point((0.3, -0.1, 0.7))
    rescale_attachments(assembly, part, 1.0, 1.3, user_initiated=True)
    points_before = [(p.position.copy(), p.original_position.copy()) for p in part.all_attach_points()]
    part_before = part.position.copy()
    child_before = child.position.copy()

    for _ in range(2):
        rescale_attachments(assembly, part, 1.3, 1.3, user_initiated=True)

    for point, (position, original) in zip(part.all_attach_points(), points_before):
        assert np.array_equal(point.position, position)
        assert np.array_equal(point.original_position, original)
    assert np.array_equal(part.position, part_before)
    assert np.array_equal(child.position, child_before)


def test_child_neighbour_moves_with_the_point():
    assembly, part, child = _child_setup()

    report = rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    np.testing.assert_allclose(child.position, [2.0, 0.0, 0.0])
    np.testing.assert_allclose(child.local_position, [2.0, 0.0, 0.0])
    np.testing.assert_array_equal(part.position, [0.0, 0.0, 0.0])
    update = report.updates[0]
    assert update.moved == MOVED_NEIGHBOR
    assert update.neighbor == child.handle
    np.testing.assert_allclose(update.delta, [1.0, 0.0, 0.0])
    np.testing.assert_allclose(update.world_delta, [1.0, 0.0, 0.0])
    assert not update.root_compensated


def test_child_neighbour_carries_its_descendants():
    assembly, part, child = _child_setup()
    child.add_attach_point("mount", (0, 0, 0))
    child.add_attach_point("tip", (1, 0, 0))
    grand = assembly.add_part("hub", position=(2, 0, 0))
    assembly.attach(grand, child, parent_point="tip")
    offset = grand.position - child.position

    rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    np.testing.assert_allclose(_joint_gap(part, "side", child, "mount"), [0.0, 0.0, 0.0])
    np.testing.assert_allclose(grand.position - child.position, offset)
    np.testing.assert_allclose(grand.position, [3.0, 0.0, 0.0])
    np.testing.assert_allclose(grand.local_position, [1.0, 0.0, 0.0])


def test_child_offset_follows_part_rotation():
    rotation = Rotation.from_euler("z", 90, degrees=True)
    assembly, part, child = _child_setup(rotation)
    start = child.position.copy()

    rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    np.testing.assert_allclose(child.position - start, [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(child.local_position, [2.0, 0.0, 0.0], atol=1e-12)


def test_parent_neighbour_stays_and_root_is_compensated():
    assembly, root, part = _parent_setup()
    np.testing.assert_array_equal(_joint_gap(root, "top", part, "bottom"), [0.0, 0.0, 0.0])

    report = rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    np.testing.assert_allclose(_joint_gap(root, "top", part, "bottom"), [0.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(root.position, [0.0, -1.0, 0.0])
    np.testing.assert_allclose(part.position, [0.0, 2.0, 0.0])
    np.testing.assert_allclose(part.local_position, [0.0, 3.0, 0.0])
    update = report.updates[0]
    assert update.moved == MOVED_SELF
    assert update.root_compensated


def test_parent_neighbour_offset_is_taken_from_local_position():
    assembly = Assembly("vessel")
    root = assembly.add_part("root")
    root.add_attach_point("socket", (2, 0, 0))
    part = assembly.add_part("body", position=(1, 0, 0))
    part.add_attach_point("side", (1, 0, 0))
    assembly.attach(part, root, parent_point="socket", child_point="side")

    rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    np.testing.assert_allclose(part.local_position, [0.0, 0.0, 0.0])
    np.testing.assert_allclose(root.position, [1.0, 0.0, 0.0])
    np.testing.assert_allclose(part.position, [1.0, 0.0, 0.0])
    np.testing.assert_allclose(_joint_gap(root, "socket", part, "side"), [0.0, 0.0, 0.0])


def test_interior_part_keeps_both_joints_closed():
    assembly = Assembly("vessel")
    root = assembly.add_part("root")
    root.add_attach_point("top", (0, 1, 0))
    mid = assembly.add_part("mid", position=(0, 2, 0))
    mid.add_attach_point("bottom", (0, -1, 0))
    mid.add_attach_point("top", (0, 1, 0))
    body = assembly.add_part("body", position=(0, 4, 0))
    body.add_attach_point("bottom", (0, -1, 0))
    body.add_attach_point("side", (1, 0, 0))
    wheel = assembly.add_part("wheel", position=(1, 4, 0))
    wheel.add_attach_point("mount", (0, 0, 0))
    assembly.attach(mid, root, parent_point="top", child_point="bottom")
    assembly.attach(body, mid, parent_point="top", child_point="bottom")
    assembly.attach(wheel, body, parent_point="side", child_point="mount")

    report = rescale_attachments(assembly, body, 1.0, 2.0, user_initiated=True)

    assert [u.moved for u in report.updates] == [MOVED_SELF, MOVED_NEIGHBOR]
    for first, first_point, second, second_point in (
        (root, "top", mid, "bottom"),
        (mid, "top", body, "bottom"),
        (body, "side", wheel, "mount"),
    ):
        np.testing.assert_allclose(
            _joint_gap(first, first_point, second, second_point), [0.0, 0.0, 0.0], atol=1e-12
        )
    np.testing.assert_allclose(root.position, [0.0, -1.0, 0.0])
    np.testing.assert_allclose(body.position, [0.0, 4.0, 0.0])
    np.testing.assert_allclose(wheel.position, [2.0, 4.0, 0.0])


def test_root_compensation_can_be_disabled():
    set_settings(PartkitSettings(compensate_root=False))
    assembly, root, part = _parent_setup()

    report = rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    np.testing.assert_allclose(part.position, [0.0, 3.0, 0.0])
    np.testing.assert_array_equal(root.position, [0.0, 0.0, 0.0])
    assert not report.updates[0].root_compensated


def test_root_part_moving_itself_is_not_compensated():
    assembly = Assembly()
    root = assembly.add_part("root")
    root.add_attach_point("bottom", (0, -1, 0))
    other = assembly.add_part("loose", position=(0, -1, 0))
    root.find_attach_point("bottom").attached_part = other.handle

    report = rescale_attachments(assembly, root, 1.0, 3.0, user_initiated=True)

    np.testing.assert_allclose(root.position, [0.0, 2.0, 0.0])
    np.testing.assert_array_equal(other.position, [0.0, -1.0, 0.0])
    assert report.updates[0].moved == MOVED_SELF
    assert not report.updates[0].root_compensated


def test_stale_neighbour_moves_self_and_warns(caplog):
    assembly = Assembly()
    part = assembly.add_part("body")
    part.add_attach_point("side", (1, 0, 0)).attached_part = 42

    with caplog.at_level(logging.WARNING, logger="partkit.rescale"):
        report = rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    np.testing.assert_allclose(part.position, [-1.0, 0.0, 0.0])
    assert report.updates[0].moved == MOVED_SELF
    assert report.warnings and "unknown part 42" in report.warnings[0]
    assert "unknown part 42" in caplog.text


def test_programmatic_rescale_leaves_neighbours_alone():
    assembly, part, child = _child_setup()

    report = rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=False)

    np.testing.assert_array_equal(child.position, [1.0, 0.0, 0.0])
    np.testing.assert_array_equal(part.find_attach_point("side").position, [2.0, 0.0, 0.0])
    assert not report.moved_parts
    assert report.updates[0].world_delta is None


def test_surface_point_is_processed_first():
    assembly = Assembly()
    part = assembly.add_part("body")
    part.add_attach_point("top", (0, 1, 0))
    part.add_attach_point("bottom", (0, -1, 0))
    part.set_surface_point((0, 0, 1))

    report = rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=False)

    assert [u.point for u in report.updates] == ["srfAttach", "top", "bottom"]


def test_part_without_points_does_nothing():
    assembly = Assembly()
    part = assembly.add_part("plate", position=(1, 1, 1))

    report = rescale_attachments(assembly, part, 1.0, 2.0, user_initiated=True)

    assert report.updates == []
    np.testing.assert_array_equal(part.position, [1.0, 1.0, 1.0])


def test_zero_previous_scale_is_not_guarded():
    assembly = Assembly()
    part = assembly.add_part("body")
    part.add_attach_point("side", (1, 0, 0))

    with pytest.raises(ZeroDivisionError):
        rescale_attachments(assembly, part, 0.0, 1.0, user_initiated=False)


def test_rescale_part_tracks_scale_and_round_trips():
    assembly, part, child = _child_setup()

    rescale_part(assembly, part, 2.5)
    assert part.scale == 2.5
    np.testing.assert_allclose(child.position, [2.5, 0.0, 0.0])

    rescale_part(assembly, part, 1.0)
    assert part.scale == 1.0
    np.testing.assert_allclose(child.position, [1.0, 0.0, 0.0])
    np.testing.assert_allclose(part.find_attach_point("side").position, [1.0, 0.0, 0.0])
