import pytest

from voxscene.data import OutOfBoundsError, VoxelData
from voxscene.modify import VoxelRegion, clamp_region, modify_voxels
from voxscene.voxel import Voxel


def test_modify_voxels_single_cell():
    data = VoxelData.new((4, 4, 4))
    region = VoxelRegion(origin=(2, 2, 2), size=(1, 1, 1))
    modify_voxels(data, lambda pos, voxel, model: Voxel(7), region)
    with pytest.raises(OutOfBoundsError):
        data.get_voxel_at_point((4, 4, 4))
    with pytest.raises(OutOfBoundsError):
        data.get_voxel_at_point((-1, -1, -1))
    assert data.get_voxel_at_point((2, 2, 2)).value == 7
    assert data.get_voxel_at_point((1, 2, 2)) == Voxel.EMPTY


def test_modify_whole_model_when_no_region():
    data = VoxelData.new((2, 2, 2))
    modify_voxels(data, lambda pos, voxel, model: Voxel(3))
    assert all(
        data.get_voxel_at_point((x, y, z)) == Voxel(3)
        for x in range(2)
        for y in range(2)
        for z in range(2)
    )


def test_callback_sees_original_model():
    data = VoxelData.new((3, 3, 3))

    def grow(pos, voxel, model):
        if pos[1] == 0:
            return Voxel(5)
        return model.get_voxel_at_point((pos[0], pos[1] - 1, pos[2]))

    modify_voxels(data, grow, None)
    assert data.get_voxel_at_point((1, 0, 1)) == Voxel(5)
    assert data.get_voxel_at_point((1, 1, 1)) == Voxel.EMPTY


def test_callback_receives_positions_and_voxels():
    data = VoxelData.new((4, 4, 4))
    data.set_voxel(Voxel(9), (1, 1, 1))
    seen = []

    def record(pos, voxel, model):
        seen.append((pos, voxel))
        return voxel

    modify_voxels(data, record, VoxelRegion((1, 1, 1), (2, 1, 1)))
    assert seen == [((1, 1, 1), Voxel(9)), ((2, 1, 1), Voxel.EMPTY)]


def test_from_center_and_center_round_trip():
    region = VoxelRegion.from_center((5, 6, 7), (2, 3, 4))
    assert region.center() == (5.0, 6.0, 7.0)
    assert region.size == (4, 6, 8)


def test_clamp_none_is_whole_model():
    assert clamp_region(None, (3, 4, 5)) == VoxelRegion((0, 0, 0), (3, 4, 5))


def test_clamp_keeps_region_inside_model():
    size = (4, 4, 4)
    region = clamp_region(VoxelRegion((-5, 2, 10), (4, 4, 0)), size)
    assert region.origin[0] == 0
    assert region.origin[1] == 2
    for o, s, m in zip(region.origin, region.size, size):
        assert 0 <= o < m
        assert 1 <= s <= m - o


def test_clamp_rejects_empty_model():
    with pytest.raises(ValueError):
        clamp_region(VoxelRegion((0, 0, 0), (1, 1, 1)), (0, 2, 2))