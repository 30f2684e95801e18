import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import config


class EncryptionState(str, Enum):
    ENCRYPTED = "encrypted"
    NOT_ENCRYPTED = "not_encrypted"
    UNKNOWN = "unknown"


class ToolState(str, Enum):
    OK = "ok"
    UNRECOGNIZED = "unrecognized"   # runs, but --version output has no version token
    MISSING = "missing"


@dataclass
class QpdfStatus:
    """Outcome of the startup `qpdf --version` probe."""
    state: ToolState
    version: Optional[str] = None
    error: Optional[str] = None
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state != ToolState.MISSING


@dataclass
class FileEntry:
    """
    One imported PDF and its current processing state.
    Entries are owned by the session; the unlock worker only ever sees copies.
    """
    path: str                               # Absolute path of the original PDF
    icon: str = config.ICON_LOCKED
    status: str = config.STATUS_UNKNOWN
    unlock_result: Optional[bool] = None    # None until the worker reports
    output_path: Optional[str] = None       # Decrypted copy, only set on success

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    @classmethod
    def from_probe(cls, path: str, state: EncryptionState) -> "FileEntry":
        if state == EncryptionState.NOT_ENCRYPTED:
            return cls(path, config.ICON_UNLOCKED, config.STATUS_UNRESTRICTED)
        if state == EncryptionState.ENCRYPTED:
            return cls(path, config.ICON_LOCKED, config.STATUS_RESTRICTED)
        return cls(path, config.ICON_LOCKED, config.STATUS_UNKNOWN)


# --- Worker -> UI messages ---
@dataclass(frozen=True)
class FileResult:
    index: int
    success: bool
    output_path: Optional[str] = None


@dataclass(frozen=True)
class Info:
    text: str


@dataclass(frozen=True)
class Done:
    pass


UnlockMessage = Union[FileResult, Info, Done]


@dataclass
class UnlockSummary:
    success_count: int = 0
    total_count: int = 0

    @property
    def all_failed(self) -> bool:
        return self.total_count > 0 and self.success_count == 0

    @property
    def text(self) -> str:
        if self.total_count > 0 and self.success_count == self.total_count:
            return config.TEXT_ALL_SUCCESS
        if self.success_count > 0:
            return config.TEXT_PARTIAL_SUCCESS.format(success=self.success_count, total=self.total_count)
        return config.TEXT_ALL_FAILED
