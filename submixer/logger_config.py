#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль настройки логирования.
"""

import logging
import sys
from typing import Optional

from .config import LOG_LEVEL, LOG_FILE, LOG_MAX_SIZE, LOG_BACKUP_COUNT

logger = logging.getLogger(__name__)

_MAX_ERROR_MSG_LENGTH = 200


def setup_logging(level: Optional[str] = None, log_file: Optional[str] = None, stream=None):
    """Настраивает систему логирования. stream - поток консольного вывода (по умолчанию stdout)."""
    level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    resolved = level_map.get((level or LOG_LEVEL).upper(), logging.INFO)

    handlers = [logging.StreamHandler(stream or sys.stdout)]

    if log_file or LOG_FILE:
        log_path = log_file or LOG_FILE
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            log_path, maxBytes=LOG_MAX_SIZE, backupCount=LOG_BACKUP_COUNT, encoding='utf-8'
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=resolved,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True
    )


def shorten_error(exc: BaseException | str) -> str:
    """Обрезает текст ошибки для лога."""
    error_msg = str(exc)
    if len(error_msg) > _MAX_ERROR_MSG_LENGTH:
        error_msg = error_msg[:_MAX_ERROR_MSG_LENGTH - 3] + "..."
    return error_msg
