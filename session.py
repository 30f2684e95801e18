"""
session.py

The unlock session: owns the file list, the mascot animation, the pending
worker channel and every piece of user-visible text. It knows nothing about
tkinter; the window shell calls into it once per frame and on user input.
"""

import logging
import os
import queue
from typing import Callable, Iterable, List, Optional

import config
from animation import AnimationController, AnimationMode
from logger import log_and_display_error, log_user_action
from models import (Done, EncryptionState, FileEntry, FileResult, Info, QpdfStatus,
                    UnlockSummary)
from pdf_unlocker import check_qpdf_ready, detect_encrypted, start_unlock_worker

logger = logging.getLogger("CrackLeaf")

ACCEPTED_EXTENSIONS = {'.pdf'}


def is_pdf(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in ACCEPTED_EXTENSIONS


def window_height_for(count: int) -> int:
    if count <= 2:
        return config.WINDOW_HEIGHT_BASE
    if count <= config.LIST_MAX_FILES:
        return config.WINDOW_HEIGHT_BASE + (count - 2) * config.WINDOW_HEIGHT_STEP
    return config.WINDOW_HEIGHT_MAX


class CrackLeafSession:
    def __init__(self,
                 probe_tool: Callable[[], QpdfStatus] = check_qpdf_ready,
                 detect: Callable[[str], EncryptionState] = detect_encrypted,
                 spawn_worker: Callable[[List[FileEntry]], "queue.Queue"] = start_unlock_worker,
                 animation: Optional[AnimationController] = None):
        self.detect = detect
        self.spawn_worker = spawn_worker

        self.entries: List[FileEntry] = []
        self.unlock_in_progress = False
        self.work_done = False
        self.ready_for_success = False
        self.had_unlock = False
        self.result_text = ""
        self.prompted_for_tool = False
        self.worker_channel: Optional[queue.Queue] = None

        self.animation = animation or AnimationController()
        self.animation.on_peck_complete = self._on_peck_complete
        self.animation.on_success_complete = self._on_success_complete

        self.tool_status = probe_tool()

    # --- Derived view state ---
    @property
    def tool_ok(self) -> bool:
        return self.tool_status.ok

    @property
    def tool_message(self) -> Optional[str]:
        """Persistent status line: the error when qpdf is missing, else any warning."""
        if not self.tool_ok:
            return self.tool_status.error
        return self.tool_status.warning

    @property
    def hint_text(self) -> str:
        if not self.entries:
            return config.TEXT_HINT_EMPTY
        if len(self.entries) == 1:
            entry = self.entries[0]
            return f"{entry.icon} {entry.name}"
        return config.TEXT_HINT_MULTI.format(count=len(self.entries))

    @property
    def window_height(self) -> int:
        return window_height_for(len(self.entries))

    def take_tool_prompt(self) -> bool:
        """True exactly once if the install dialog should be shown."""
        if self.tool_ok or self.prompted_for_tool:
            return False
        self.prompted_for_tool = True
        return True

    # --- Add ---
    def add_files(self, paths: Iterable[str]) -> int:
        """
        Import dropped or picked paths. Non-PDFs and duplicates are silently
        skipped, as is anything beyond the list capacity. Returns the number
        of entries added.
        """
        if self.unlock_in_progress:
            logger.info("[Session] 正在解锁，忽略新导入的文件")
            return 0

        if self.had_unlock:
            self.entries.clear()
            self.result_text = ""
            self.had_unlock = False

        added = 0
        for path in paths:
            if not path or not is_pdf(path):
                continue
            path = os.path.abspath(path)
            if any(f.path == path for f in self.entries):
                continue
            if len(self.entries) >= config.LIST_MAX_FILES:
                logger.info(f"[Session] 列表已满 ({config.LIST_MAX_FILES})，忽略: {path}")
                break
            state = self.detect(path)
            self.entries.append(FileEntry.from_probe(path, state))
            logger.info(f"[Session] 导入 {path} ({state.value})")
            added += 1

        if added:
            self.result_text = ""
            log_user_action("导入文件", f"{added} 个", context="Session")
        if self.entries:
            self.animation.start_happy_loop()
        return added

    # --- Unlock ---
    def request_unlock(self) -> bool:
        """Mascot click with files present."""
        if not self.tool_ok:
            if self.tool_status.error:
                self.result_text = log_and_display_error(self.tool_status.error)
            return False
        return self.start_unlock()

    def start_unlock(self) -> bool:
        if self.unlock_in_progress or not self.entries or not self.tool_ok:
            return False

        self.unlock_in_progress = True
        self.work_done = False
        self.ready_for_success = False
        self.result_text = config.TEXT_PROCESSING
        self.animation.start_peck()

        log_user_action("开始解锁", f"{len(self.entries)} 个文件", context="Session")
        self.worker_channel = self.spawn_worker(list(self.entries))
        return True

    def pump_worker(self) -> bool:
        """Drain worker messages without blocking. Returns True if anything was applied."""
        if self.worker_channel is None:
            return False

        changed = False
        while self.worker_channel is not None:
            try:
                msg = self.worker_channel.get_nowait()
            except queue.Empty:
                break
            changed = True
            if isinstance(msg, FileResult):
                self._apply_file_result(msg)
            elif isinstance(msg, Info):
                # First error message wins over the progress text; later ones are dropped.
                if not self.result_text or self.result_text == config.TEXT_PROCESSING:
                    self.result_text = msg.text
            elif isinstance(msg, Done):
                self.work_done = True
                self.had_unlock = True
                self.worker_channel = None
                self.maybe_start_success()
        return changed

    def _apply_file_result(self, msg: FileResult):
        if not 0 <= msg.index < len(self.entries):
            logger.warning(f"[Session] 收到无效的结果索引 {msg.index}")
            return
        entry = self.entries[msg.index]
        success = msg.success and msg.output_path is not None
        entry.unlock_result = success
        if success:
            entry.output_path = msg.output_path
            entry.status = config.STATUS_UNLOCKED
            state = self.detect(msg.output_path)
            entry.icon = config.ICON_LOCKED if state == EncryptionState.ENCRYPTED else config.ICON_UNLOCKED
        else:
            # Drop any copy from an earlier run; the icon goes back to what the source probes as
            entry.output_path = None
            entry.status = config.STATUS_UNLOCK_FAILED
            entry.icon = FileEntry.from_probe(entry.path, self.detect(entry.path)).icon

    def summary(self) -> UnlockSummary:
        return UnlockSummary(
            success_count=sum(1 for f in self.entries if f.unlock_result is True),
            total_count=len(self.entries),
        )

    def maybe_start_success(self):
        """Start the result animation once the worker is done and Peck has played out."""
        if not (self.work_done and self.ready_for_success):
            return
        summary = self.summary()
        self.result_text = summary.text
        logger.info(f"[Session] 解锁完成: {summary.success_count}/{summary.total_count}")
        self.animation.start_success(reverse=summary.all_failed)

    def _on_peck_complete(self):
        self.ready_for_success = True
        self.maybe_start_success()

    def _on_success_complete(self):
        self.unlock_in_progress = False
        if self.entries:
            self.animation.start_happy_loop()
        else:
            self.animation.set_mode(AnimationMode.LOGO)

    # --- Per-frame ---
    def set_mascot_hovered(self, hovered: bool):
        """While idle with files, hovering shows the still logo; otherwise the happy loop plays."""
        if self.unlock_in_progress or not self.entries:
            return
        if hovered:
            self.animation.set_mode(AnimationMode.LOGO)
        elif self.animation.mode != AnimationMode.HAPPY_LOOP:
            self.animation.start_happy_loop()

    def update(self) -> bool:
        """One UI frame: advance the animation and apply worker messages."""
        ticked = self.animation.tick()
        pumped = self.pump_worker()
        return ticked or pumped
