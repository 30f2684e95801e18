# logger.py
import logging
import os
import platform
from logging.handlers import RotatingFileHandler
from typing import Optional

import config

LOGGER_NAME = "CrackLeaf"


def setup_logger(log_dir=None, log_file=config.LOG_FILE, level=None, debug=False):
    log_dir = log_dir or config.LOG_DIR
    level = level or getattr(logging, config.LOG_LEVEL, logging.INFO)
    debug = debug or config.DEBUG

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.DEBUG if debug else level)
    logger.propagate = False

    formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')

    # 控制台
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG if debug else logging.INFO)
    ch.setFormatter(formatter)
    logger.addHandler(ch)

    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e:
        logger.warning(f"无法创建日志目录 {log_dir}，仅输出到控制台: {e}")
        return logger

    # 主日志文件 - 使用轮转日志
    fh = RotatingFileHandler(os.path.join(log_dir, log_file), maxBytes=5 * 1024 * 1024,
                             backupCount=3, encoding="utf-8")
    fh.setLevel(logging.DEBUG if debug else level)
    fh.setFormatter(formatter)

    # 错误日志文件 - 使用轮转日志
    eh = RotatingFileHandler(os.path.join(log_dir, "error.log"), maxBytes=2 * 1024 * 1024,
                             backupCount=2, encoding="utf-8")
    eh.setLevel(logging.ERROR)
    eh.setFormatter(formatter)

    logger.addHandler(fh)
    logger.addHandler(eh)

    logger.info(f"{config.APP_NAME} {config.APP_VERSION} logger initialized")
    logger.info(f"Python version: {platform.python_version()}")
    logger.info(f"Platform: {platform.platform()}")

    return logger


def get_logger():
    return logging.getLogger(LOGGER_NAME)


# 统一错误日志和状态栏提示
def log_and_display_error(message: str, exception: Optional[Exception] = None) -> str:
    if exception:
        get_logger().error(message, exc_info=True)
    else:
        get_logger().error(message)
    return message  # 供 UI 状态栏等调用


def log_user_action(action: str, details: str = "", context: str = ""):
    """记录用户操作"""
    get_logger().info(f"用户操作 [{context}]: {action} - {details}")
