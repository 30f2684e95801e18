"""
pdf_unlocker.py

Removes owner-level restrictions from PDF files by delegating to the
external `qpdf` tool. Covers locating the binary, the startup health check,
the per-file encryption probe and the background unlock worker.
"""

import dataclasses
import logging
import os
import queue
import subprocess
import sys
import threading
from pathlib import Path
from typing import List, Optional

import config
from logger import log_and_display_error
from models import Done, EncryptionState, FileEntry, FileResult, Info, QpdfStatus, ToolState

logger = logging.getLogger("CrackLeaf")


def app_dir() -> Path:
    """Directory of the running program: the frozen executable, or this source tree."""
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parent


# --- Tool discovery ---
def resolve_qpdf_command() -> str:
    """
    Locate the qpdf binary: next to the program first (portable installs),
    then the current working directory, then a bare name for PATH lookup.
    """
    filename = config.QPDF_FILENAME
    for directory in (app_dir(), Path.cwd()):
        candidate = directory / filename
        if candidate.exists():
            return str(candidate)
    return filename


def _run_qpdf(args: List[str]) -> subprocess.CompletedProcess:
    """Run qpdf with captured output. Raises OSError if it cannot be spawned."""
    kwargs = {}
    if sys.platform == "win32":
        kwargs["creationflags"] = config.CREATE_NO_WINDOW
    cmd = [resolve_qpdf_command(), *args]
    logger.debug(f"[qpdf] {' '.join(cmd)}")
    return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, **kwargs)


def _decode(data: Optional[bytes]) -> str:
    return (data or b"").decode("utf-8", errors="replace")


# --- Startup health check ---
def parse_qpdf_version(output: str) -> Optional[str]:
    """Return the first whitespace-separated token that starts with an ASCII digit."""
    for token in output.split():
        if token[0] in "0123456789":
            return token.strip()
    return None


def check_qpdf_ready() -> QpdfStatus:
    """
    Run `qpdf --version` once and classify the tool's availability.

    Returns:
        QpdfStatus: OK with the version, UNRECOGNIZED with a warning, or
        MISSING with a user-facing error message.
    """
    try:
        proc = _run_qpdf(["--version"])
    except OSError as e:
        logger.error(f"[qpdf] 无法启动: {e}")
        return QpdfStatus(ToolState.MISSING, error=config.QPDF_ERROR_UNAVAILABLE.format(error=e))

    if proc.returncode != 0:
        stderr = _decode(proc.stderr).strip()
        msg = config.QPDF_ERROR_FAILED_DETAIL.format(stderr=stderr) if stderr else config.QPDF_ERROR_FAILED
        logger.error(f"[qpdf] --version 退出码 {proc.returncode}: {stderr}")
        return QpdfStatus(ToolState.MISSING, error=msg)

    version = parse_qpdf_version(_decode(proc.stdout))
    if version is None:
        logger.warning("[qpdf] 版本输出无法识别")
        return QpdfStatus(ToolState.UNRECOGNIZED, warning=config.QPDF_WARNING_UNRECOGNIZED)

    logger.info(f"[qpdf] 检测到版本 {version}")
    return QpdfStatus(ToolState.OK, version=version)


def qpdf_setup_message(platform_name: str = sys.platform, pointer_bits: Optional[int] = None) -> str:
    """Installation instructions shown when qpdf is missing."""
    if platform_name == "darwin":
        return "未检测到 qpdf。\n\n请在终端执行：\nbrew install qpdf\n\n安装完成后重启程序。"
    if platform_name == "win32":
        if pointer_bits is None:
            pointer_bits = 64 if sys.maxsize > 2 ** 32 else 32
        arch = "msvc64" if pointer_bits == 64 else "msvc32"
        return (
            "未检测到 qpdf。\n\n请前往：\nhttps://github.com/qpdf/qpdf/releases\n\n"
            f"下载 {arch} 版本（例如 qpdf-<version>-{arch}.zip），\n"
            "解压后将 qpdf.exe 放到程序同目录。"
        )
    return "未检测到 qpdf，请安装后重启程序。"


# --- Encryption probe ---
def detect_encrypted(path: str) -> EncryptionState:
    """
    Classify a file with `qpdf --show-encryption`.
    Anything that is not clearly reported, including a failed run, is UNKNOWN.
    """
    try:
        proc = _run_qpdf(["--show-encryption", str(path)])
    except (OSError, ValueError) as e:
        logger.warning(f"[qpdf] 加密检测无法启动 ({path}): {e}")
        return EncryptionState.UNKNOWN

    if proc.returncode != 0:
        logger.info(f"[qpdf] 加密检测失败 ({path})，退出码 {proc.returncode}")
        return EncryptionState.UNKNOWN

    stdout = _decode(proc.stdout).lower()
    if any(marker in stdout for marker in config.ENCRYPTED_MARKERS):
        return EncryptionState.ENCRYPTED
    if any(marker in stdout for marker in config.NOT_ENCRYPTED_MARKERS):
        return EncryptionState.NOT_ENCRYPTED
    return EncryptionState.UNKNOWN


# --- Output naming ---
def resolve_download_dir() -> Optional[Path]:
    """The user's Downloads folder, created if missing. None if it cannot be used."""
    downloads = Path(os.path.expanduser("~")) / "Downloads"
    try:
        downloads.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.warning(f"[Unlocker] 无法使用下载目录 {downloads}: {e}")
        return None
    return downloads


def resolve_output_dir(source: str) -> Path:
    downloads = resolve_download_dir()
    if downloads is not None:
        return downloads
    parent = Path(source).parent
    if str(parent):
        return parent
    return Path.cwd()


def unique_output_path(output_dir: Path, file_stem: str) -> Path:
    """
    `<stem>_unlocked.pdf`, or the first free `<stem>_unlocked_<n>.pdf` for
    n in 1..9999. When every candidate exists, `<stem>_unlocked_overflow.pdf`
    is returned even though it may overwrite.
    """
    base = f"{file_stem}{config.OUTPUT_SUFFIX}"
    candidate = output_dir / f"{base}.pdf"
    if not candidate.exists():
        return candidate
    for idx in range(1, config.OUTPUT_MAX_INDEX + 1):
        candidate = output_dir / f"{base}_{idx}.pdf"
        if not candidate.exists():
            return candidate
    return output_dir / f"{base}_overflow.pdf"


# --- Unlock ---
def unlock_pdf(input_path: str) -> Optional[str]:
    """
    Decrypt one PDF with an empty password into the output directory.

    Args:
        input_path (str): Path to the restricted PDF.

    Returns:
        Optional[str]: The written output path, or None if qpdf exited
        non-zero or produced no file.

    Raises:
        OSError: qpdf could not be started.
    """
    output_dir = resolve_output_dir(input_path)
    file_stem = Path(input_path).stem or "output"
    output_path = unique_output_path(output_dir, file_stem)

    proc = _run_qpdf(["--password=", "--decrypt", str(input_path), str(output_path)])
    if proc.returncode != 0:
        logger.warning(f"[Unlocker] '{input_path}' 解锁失败，退出码 {proc.returncode}: "
                       f"{_decode(proc.stderr).strip()}")
        return None
    if not output_path.exists():
        logger.warning(f"[Unlocker] '{input_path}' qpdf 返回成功但未生成输出文件")
        return None

    logger.info(f"[Unlocker] '{input_path}' 已解锁，输出保存到: {output_path}")
    return str(output_path)


def run_unlock(files: List[FileEntry], channel: "queue.Queue") -> None:
    """
    Process a snapshot of entries strictly in order, posting one FileResult
    per entry (plus an Info on spawn failure) and a final Done.
    """
    try:
        for index, entry in enumerate(files):
            try:
                output_path = unlock_pdf(entry.path)
            except (OSError, ValueError) as e:
                # ValueError: the path cannot be passed to a process (e.g. embedded NUL)
                message = log_and_display_error(config.UNLOCK_INFO_FAILED.format(
                    error=config.QPDF_ERROR_SPAWN.format(error=e)))
                channel.put(FileResult(index, False, None))
                channel.put(Info(message))
                continue
            channel.put(FileResult(index, output_path is not None, output_path))
    finally:
        channel.put(Done())


def start_unlock_worker(files: List[FileEntry]) -> "queue.Queue":
    """Spawn the background worker on a copy of `files` and return its channel."""
    channel = queue.Queue()
    snapshot = [dataclasses.replace(f) for f in files]
    worker = threading.Thread(target=run_unlock, args=(snapshot, channel),
                              name="crackleaf-unlock", daemon=True)
    worker.start()
    return channel
