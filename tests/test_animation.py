from voxscene.animation import AnimationUpdate, VoxelAnimationPlayer, frame_visibilities


def test_play_second_frame():
    frame_count = 4
    player = VoxelAnimationPlayer(frames=list(range(frame_count)), frame_rate=0.001)
    assert player.advance(0.0) == AnimationUpdate.SAME_FRAME
    update = player.advance(0.002)
    assert update.frame == 1
    visibility = frame_visibilities(range(frame_count), update.frame)
    assert len(visibility) == frame_count
    assert visibility[0] is False
    assert visibility[1] is True


def test_defaults():
    player = VoxelAnimationPlayer()
    assert player.frame_rate == 1.0 / 8.0
    assert player.repeat_count is None
    assert player.despawn_on_finish is True
    assert player.is_paused is False


def test_paused_player_stays_on_frame():
    player = VoxelAnimationPlayer(frames=[0, 1], frame_rate=0.001, is_paused=True)
    assert player.advance(1.0) == AnimationUpdate.SAME_FRAME
    assert player.current_frame_index == 0
    assert player.elapsed == 0.0


def test_elapsed_must_exceed_frame_rate():
    player = VoxelAnimationPlayer(frames=[0, 1], frame_rate=0.5)
    assert player.advance(0.5) == AnimationUpdate.SAME_FRAME
    assert player.advance(0.1).frame == 1


def test_forever_wraps_around():
    player = VoxelAnimationPlayer(frames=[0, 1, 2], frame_rate=0.001)
    shown = [player.advance(0.01).frame for _ in range(4)]
    assert shown == [1, 2, 0, 1]
    assert player.play_count == 1


def test_count_reaches_end():
    player = VoxelAnimationPlayer(frames=[0, 1], frame_rate=0.001, repeat_count=2)
    updates = [player.advance(0.01) for _ in range(4)]
    assert [u.frame for u in updates[:3]] == [1, 0, 1]
    assert updates[3] == AnimationUpdate.REACHED_END
    assert updates[3].reached_end is True


def test_frames_map_to_their_values():
    player = VoxelAnimationPlayer(frames=[5, 7], frame_rate=0.001)
    assert player.advance(0.01).frame == 7
    assert player.advance(0.01).frame == 5


def test_frame_visibilities_hides_all_but_one():
    visibility = frame_visibilities([0, 1, 2, 3], 2)
    assert visibility == [False, False, True, False]
    assert sum(visibility) == 1