"""
animation.py

Mascot animation state machine. Frames advance on a fixed wall-clock tick;
completion of the Peck and Success loops is reported through callbacks so
the session can run its rendezvous.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, Optional

import config

logger = logging.getLogger("CrackLeaf")


class AnimationMode(Enum):
    LOGO = "logo"
    HAPPY_LOOP = "happy_loop"
    PECK = "peck"
    SUCCESS = "success"


class AnimationController:
    def __init__(self, frame_counts: Optional[Dict[str, int]] = None,
                 frame_interval: float = config.FRAME_INTERVAL_MS / 1000.0,
                 clock: Callable[[], float] = time.monotonic):
        if frame_counts is None:
            frame_counts = {key: len(names) for key, names in config.FRAME_SETS.items()}
        self.frame_counts = frame_counts
        self.frame_interval = frame_interval
        self.clock = clock

        self.mode = AnimationMode.LOGO
        self.frame_index = 0
        self.loops_left = 0
        self.success_reverse = False
        self.last_tick_time = clock()

        self.on_peck_complete: Optional[Callable[[], None]] = None
        self.on_success_complete: Optional[Callable[[], None]] = None

    @property
    def frame_set(self) -> str:
        """Key into config.FRAME_SETS for the frames currently shown."""
        if self.mode == AnimationMode.SUCCESS:
            return "success_reverse" if self.success_reverse else "success"
        return self.mode.value

    @property
    def is_active(self) -> bool:
        return self.mode != AnimationMode.LOGO

    def frame_count(self) -> int:
        return self.frame_counts.get(self.frame_set, 1)

    def current_frame(self) -> int:
        return min(self.frame_index, max(self.frame_count() - 1, 0))

    # --- Mode switches ---
    def set_mode(self, mode: AnimationMode):
        """Switch mode, restarting from the first frame. No-op if already in `mode`."""
        if self.mode != mode:
            self.mode = mode
            self.frame_index = 0
            self.loops_left = 0

    def start_happy_loop(self):
        self.set_mode(AnimationMode.HAPPY_LOOP)

    def start_peck(self, loops: int = config.PECK_LOOPS):
        self.mode = AnimationMode.PECK
        self.frame_index = 0
        self.loops_left = loops
        self.last_tick_time = self.clock()

    def start_success(self, reverse: bool):
        self.success_reverse = reverse
        self.mode = AnimationMode.SUCCESS
        self.frame_index = 0
        self.loops_left = config.SUCCESS_LOOPS
        self.last_tick_time = self.clock()

    # --- Tick ---
    def tick(self) -> bool:
        """
        Advance one frame if the interval has elapsed.
        Returns True when the shown frame changed and the UI should redraw.
        """
        if self.mode == AnimationMode.LOGO:
            return False

        now = self.clock()
        if now - self.last_tick_time < self.frame_interval:
            return False
        self.last_tick_time = now

        count = self.frame_count()
        if count <= 0:
            return False
        self.frame_index = (self.frame_index + 1) % count
        if self.frame_index != 0:
            return True

        # Wrapped around
        if self.mode == AnimationMode.PECK:
            if self.loops_left > 0:
                self.loops_left -= 1
            if self.loops_left == 0:
                logger.debug("[Animation] 啄动画完成")
                self.set_mode(AnimationMode.LOGO)
                if self.on_peck_complete:
                    self.on_peck_complete()
        elif self.mode == AnimationMode.SUCCESS:
            self.loops_left = max(self.loops_left - 1, 0)
            if self.loops_left == 0:
                logger.debug("[Animation] 结果动画完成")
                if self.on_success_complete:
                    self.on_success_complete()
        return True
