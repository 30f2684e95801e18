import logging
import os
import subprocess
import sys
from typing import List

import config
from models import FileEntry

logger = logging.getLogger("CrackLeaf")


def open_command(path: str, platform_name: str = sys.platform) -> List[str]:
    if platform_name == "win32":
        return ["cmd", "/C", "start", "", path]
    if platform_name == "darwin":
        return ["open", path]
    return ["xdg-open", path]


def open_file(path: str):
    """Open `path` with the platform's default handler. Fire-and-forget; failures are only logged."""
    kwargs = {}
    if sys.platform == "win32":
        kwargs["creationflags"] = config.CREATE_NO_WINDOW
    try:
        subprocess.Popen(open_command(path), stdout=subprocess.DEVNULL,
                         stderr=subprocess.DEVNULL, **kwargs)
    except OSError as e:
        logger.warning(f"[Open] 无法打开 {path}: {e}")


def open_entry(entry: FileEntry):
    """Prefer the decrypted copy, fall back to the original."""
    if entry.output_path and os.path.exists(entry.output_path):
        open_file(entry.output_path)
    else:
        open_file(entry.path)
