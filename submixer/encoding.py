#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль распознавания и декодирования base64.

Две стратегии распознавания:
- roundtrip: строка считается base64, если decode -> encode возвращает её без изменений.
  Меньше ложных срабатываний на обычном тексте из символов алфавита base64.
- padded: строка дополняется '=' до длины, кратной 4, и считается base64, если декодируется.
  Терпимее к подпискам без паддинга и с переносами строк.
"""

import base64
import binascii

from .config import BASE64_STRATEGY

STRATEGY_ROUNDTRIP = "roundtrip"
STRATEGY_PADDED = "padded"
STRATEGIES = (STRATEGY_ROUNDTRIP, STRATEGY_PADDED)

_URLSAFE_TABLE = str.maketrans("-_", "+/")


def _pad(s: str) -> str:
    if len(s) % 4:
        s += "=" * (4 - len(s) % 4)
    return s


def encode_base64(text: str) -> str:
    """Кодирует текст (UTF-8) в стандартный base64 с паддингом."""
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_base64(text: str) -> str:
    """
    Декодирует base64 (стандартный или url-safe, с паддингом или без) в текст UTF-8.
    При некорректных данных выбрасывает ValueError.
    """
    raw = "".join(text.split()).translate(_URLSAFE_TABLE)
    if not raw:
        raise ValueError("пустая строка")
    decoded = base64.b64decode(_pad(raw), validate=True)
    return decoded.decode("utf-8")


def _is_base64_roundtrip(s: str) -> bool:
    try:
        decoded = base64.b64decode(s, validate=True)
    except (binascii.Error, ValueError):
        return False
    return base64.b64encode(decoded).decode("ascii") == s


def _is_base64_padded(s: str) -> bool:
    # Переносы строк внутри блока допустимы, пробелы - нет
    raw = "".join(s.splitlines()).translate(_URLSAFE_TABLE)
    if not raw:
        return False
    try:
        base64.b64decode(_pad(raw), validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def is_likely_base64(text: str, strategy: str = BASE64_STRATEGY) -> bool:
    """Проверяет, похож ли текст на base64 по выбранной стратегии."""
    s = (text or "").strip()
    if not s:
        return False
    if strategy == STRATEGY_PADDED:
        return _is_base64_padded(s)
    if strategy != STRATEGY_ROUNDTRIP:
        raise ValueError(f"Неизвестная стратегия base64: {strategy}")
    return _is_base64_roundtrip(s)


def decode_if_base64(text: str, strategy: str = BASE64_STRATEGY) -> str:
    """
    Если текст похож на base64 - возвращает раскодированный текст, иначе исходный.
    Ошибка декодирования не считается ошибкой: возвращается исходный текст.
    """
    if not is_likely_base64(text, strategy):
        return text
    try:
        return decode_base64(text.strip())
    except ValueError:
        return text
