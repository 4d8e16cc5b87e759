"""Playback of frame-based voxel animations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterable, Optional


@dataclass(frozen=True)
class AnimationUpdate:
    """Outcome of advancing an animation: same frame, a new frame, or the end."""

    frame: Optional[int] = None
    reached_end: bool = False

    SAME_FRAME: ClassVar[AnimationUpdate]
    REACHED_END: ClassVar[AnimationUpdate]


AnimationUpdate.SAME_FRAME = AnimationUpdate()
AnimationUpdate.REACHED_END = AnimationUpdate(reached_end=True)


@dataclass
class VoxelAnimationPlayer:
    """Plays a sequence of frames at a fixed rate.

    ``repeat_count`` of ``None`` repeats forever; otherwise the animation
    finishes after that many plays. Times are in seconds.
    """

    frames: list[int] = field(default_factory=list)
    frame_rate: float = 1.0 / 8.0
    repeat_count: Optional[int] = None
    despawn_on_finish: bool = True
    is_paused: bool = False
    current_frame_index: int = 0
    elapsed: float = 0.0
    play_count: int = 0

    def advance(self, delta: float) -> AnimationUpdate:
        """Advance the timer by ``delta`` seconds and report what changed."""
        if self.is_paused:
            return AnimationUpdate.SAME_FRAME
        self.elapsed += delta
        if self.elapsed <= self.frame_rate:
            return AnimationUpdate.SAME_FRAME
        self.current_frame_index += 1
        if self.current_frame_index == len(self.frames):
            self.play_count += 1
            if self.repeat_count is not None and self.play_count >= self.repeat_count:
                return AnimationUpdate.REACHED_END
            self.current_frame_index = 0
        self.elapsed = 0.0
        return AnimationUpdate(frame=self.frames[self.current_frame_index])


def frame_visibilities(frame_indices: Iterable[int], shown_frame: int) -> list[bool]:
    """Visibility of each frame: only the frame matching ``shown_frame`` is shown."""
    return [index == shown_frame for index in frame_indices]