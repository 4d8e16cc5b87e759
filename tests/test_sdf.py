import math

import pytest

from voxscene.data import OutOfBoundsError
from voxscene.sdf import SDF, Quat
from voxscene.settings import VoxLoaderSettings
from voxscene.voxel import Voxel


def test_sdf_intersect_is_commutative():
    box_sphere = SDF.cuboid((2.0, 2.0, 2.0)).intersect(SDF.sphere(2.5)).voxelize(
        (7, 7, 7), VoxLoaderSettings(), Voxel(1)
    )
    sphere_box = SDF.sphere(2.5).intersect(SDF.cuboid((2.0, 2.0, 2.0))).voxelize(
        (7, 7, 7), VoxLoaderSettings(), Voxel(1)
    )
    assert box_sphere.voxels == sphere_box.voxels


def test_sdf_subtract():
    thin_box = SDF.cuboid((1.0, 2.0, 2.0)).voxelize(
        (6, 6, 6), VoxLoaderSettings(), Voxel(1)
    )
    halved_cube = (
        SDF.cuboid((2.0, 2.0, 2.0))
        .subtract(SDF.cuboid((1.0, 2.0, 2.0)).translate((1.0, 0.0, 0.0)))
        .translate((1.0, 0.0, 0.0))
        .voxelize((6, 6, 6), VoxLoaderSettings(), Voxel(1))
    )
    assert thin_box.voxels == halved_cube.voxels


def test_sdf_rotate():
    tall_box = SDF.cuboid((0.5, 2.5, 0.5)).voxelize(
        (6, 6, 6), VoxLoaderSettings(), Voxel(1)
    )
    deep_box_rotated = (
        SDF.cuboid((0.5, 0.5, 2.5))
        .rotate(Quat.from_axis_angle((1.0, 0.0, 0.0), math.pi / 2))
        .voxelize((6, 6, 6), VoxLoaderSettings(), Voxel(1))
    )
    assert tall_box.voxels == deep_box_rotated.voxels


def test_voxel_queryable():
    data = SDF.cuboid((2.0, 2.0, 2.0)).voxelize((4, 4, 4), VoxLoaderSettings(), Voxel(1))
    assert data.point_in_model((3, 0, 0)) == (3, 0, 0)
    with pytest.raises(OutOfBoundsError):
        data.point_in_model((4, 0, 0))
    assert data.local_point_to_voxel_space((0.0, 0.0, 0.0)) == (2, 2, 2)


def test_tall_box_occupies_a_column():
    data = SDF.cuboid((0.5, 2.5, 0.5)).voxelize((6, 6, 6), VoxLoaderSettings(), Voxel(1))
    for y in range(1, 6):
        assert data.get_voxel_at_point((3, y, 3)) == Voxel(1)
    assert data.get_voxel_at_point((3, 0, 3)) == Voxel.EMPTY
    assert data.get_voxel_at_point((2, 3, 3)) == Voxel.EMPTY


def test_sphere_distance():
    sphere = SDF.sphere(2.0)
    assert sphere.distance((3.0, 0.0, 0.0)) == pytest.approx(1.0)
    assert sphere.distance((0.0, 0.0, 0.0)) == pytest.approx(-2.0)


def test_cuboid_distance():
    box = SDF.cuboid((1.0, 1.0, 1.0))
    assert box.distance((3.0, 0.0, 0.0)) == pytest.approx(2.0)
    assert box.distance((0.0, 0.0, 0.0)) == pytest.approx(-1.0)


def test_add_is_union():
    a = SDF.sphere(1.0)
    b = SDF.sphere(1.0).translate((-5.0, 0.0, 0.0))
    union = a.add(b)
    assert union.distance((0.0, 0.0, 0.0)) < 0
    assert union.distance((5.0, 0.0, 0.0)) < 0
    assert union.distance((2.5, 0.0, 0.0)) > 0


def test_translate_samples_offset_point():
    moved = SDF.sphere(1.0).translate((2.0, 0.0, 0.0))
    assert moved.distance((-2.0, 0.0, 0.0)) == pytest.approx(-1.0)


def test_warp_and_distort():
    sphere = SDF.sphere(1.0)
    warped = sphere.warp(lambda p: (p[0] * 2.0, p[1], p[2]))
    assert warped.distance((1.0, 0.0, 0.0)) == pytest.approx(sphere.distance((2.0, 0.0, 0.0)))
    distorted = sphere.distort(lambda d, p: d + p[1])
    assert distorted.distance((0.0, 3.0, 0.0)) == pytest.approx(sphere.distance((0.0, 3.0, 0.0)) + 3.0)


def test_map_to_voxels_passes_centred_positions():
    seen = []

    def record(distance, position):
        seen.append(position)
        return Voxel(1) if tuple(position) == (-1.0, -1.0, -1.0) else Voxel.EMPTY

    data = SDF.sphere(1.0).map_to_voxels((2, 2, 2), VoxLoaderSettings(), record)
    assert set(seen) == {
        (x, y, z) for x in (-1.0, 0.0) for y in (-1.0, 0.0) for z in (-1.0, 0.0)
    }
    assert data.get_voxel_at_point((0, 0, 0)) == Voxel(1)
    assert data.get_voxel_at_point((1, 1, 1)) == Voxel.EMPTY


def test_map_to_voxels_writes_chosen_voxels():
    data = SDF.sphere(1.0).map_to_voxels(
        (3, 1, 1), VoxLoaderSettings(), lambda d, p: Voxel(5) if p[0] > 0 else Voxel(2)
    )
    assert data.get_voxel_at_point((0, 0, 0)) == Voxel(2)
    assert data.get_voxel_at_point((2, 0, 0)) == Voxel(5)
    assert data.size() == (3, 1, 1)


def test_quat_rotate_and_inverse():
    q = Quat.from_axis_angle((1.0, 0.0, 0.0), math.pi / 2)
    rotated = q.rotate((0.0, 0.0, 1.0))
    assert rotated == pytest.approx((0.0, -1.0, 0.0), abs=1e-9)
    back = q.inverse().rotate(rotated)
    assert back == pytest.approx((0.0, 0.0, 1.0), abs=1e-9)


def test_quat_identity_leaves_vector():
    assert Quat.IDENTITY.rotate((1.0, 2.0, 3.0)) == pytest.approx((1.0, 2.0, 3.0))


def test_rejects_wrong_dimension():
    with pytest.raises(ValueError):
        SDF.sphere(1.0).distance((1.0, 2.0))