"""
assets.py

Locates the bundled assets directory and loads the mascot frames and font.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional

from PIL import Image

import config
from pdf_unlocker import app_dir

logger = logging.getLogger("CrackLeaf")


def resolve_assets_dir() -> Path:
    """cwd/assets, then beside the program, then a macOS bundle's Resources/assets."""
    cwd_assets = Path.cwd() / config.ASSETS_DIR_NAME
    if cwd_assets.exists():
        return cwd_assets
    base = app_dir()
    candidates = [
        base / config.ASSETS_DIR_NAME,
        base.parent / "Resources" / config.ASSETS_DIR_NAME,
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return Path(config.ASSETS_DIR_NAME)


def load_placeholder() -> Image.Image:
    return Image.new('RGBA', config.PLACEHOLDER_SIZE, color=(200, 50, 50, 255))


def load_all_animation_frames(assets_dir: Path) -> Dict[str, List[Image.Image]]:
    """预加载所有动画帧图片；缺失的帧用红色占位图代替"""
    frames = {}
    cache = {}
    for key, names in config.FRAME_SETS.items():
        frames[key] = []
        for name in names:
            if name not in cache:
                path = assets_dir / f"{name}.png"
                try:
                    with Image.open(path) as img:
                        cache[name] = img.convert("RGBA")
                except (OSError, ValueError) as e:
                    logger.warning(f"[Assets] 无法加载 {path}: {e}")
                    cache[name] = load_placeholder()
            frames[key].append(cache[name])
    return frames


def register_font(assets_dir: Path) -> Optional[str]:
    """
    Make the bundled font available to Tk. Only Windows supports loading a
    private font file at runtime; elsewhere the family must be installed.
    Returns the font path that was registered, or None.
    """
    font_path = assets_dir / config.FONT_FILE
    if not font_path.exists():
        logger.warning(f"[Assets] 未找到字体文件: {font_path}")
        return None
    if sys.platform != "win32":
        return None

    import ctypes
    FR_PRIVATE = 0x10
    added = ctypes.windll.gdi32.AddFontResourceExW(os.fspath(font_path), FR_PRIVATE, 0)
    if not added:
        logger.warning(f"[Assets] 字体注册失败: {font_path}")
        return None
    return os.fspath(font_path)


def pick_font_family(available) -> str:
    """First installed family among the bundled font and the fallbacks."""
    available = set(available)
    for family in [config.FONT_FAMILY, *config.FONT_FALLBACKS]:
        if family in available:
            return family
    return "TkDefaultFont"
