#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль конфигурации - загрузка и хранение всех настроек из переменных окружения.
"""

import os
import urllib3
from dotenv import load_dotenv

# Загружаем .env из корня проекта (текущая рабочая директория при запуске sub_mixer.py)
load_dotenv()


def _env(key: str, default: str) -> str:
    """Получить строковое значение переменной окружения."""
    return os.environ.get(key, default).strip()


def _env_int(key: str, default: int) -> int:
    """Получить целочисленное значение переменной окружения."""
    v = os.environ.get(key, "").strip()
    return int(v) if v else default


def _env_float(key: str, default: float) -> float:
    """Получить значение с плавающей точкой переменной окружения."""
    v = os.environ.get(key, "").strip()
    return float(v) if v else default


def _env_bool(key: str, default: bool) -> bool:
    """Получить булево значение переменной окружения."""
    v = os.environ.get(key, "").strip().lower()
    if not v:
        return default
    return v in ("1", "true", "yes", "on")


def _parse_list(value: str) -> list[str]:
    """Парсит список из строки (запятая или точка с запятой как разделитель)."""
    if not value:
        return []
    for sep in [",", ";"]:
        if sep in value:
            return [v.strip() for v in value.split(sep) if v.strip()]
    return [value.strip()] if value.strip() else []


# Основные настройки
MODE = (_env("MODE", "link").lower() or "link")  # link | text | file
LINKS_FILE = _env("LINKS_FILE", "links.txt")

# Обход вложенных подписок
MAX_DEPTH = _env_int("MAX_DEPTH", 3)
# Потолок числа загрузок за один обход (0 = без ограничения, остаётся только глубина)
MAX_FETCHES = _env_int("MAX_FETCHES", 200)
FETCH_TIMEOUT = _env_float("FETCH_TIMEOUT", 15.0)
# 1 = строго последовательные загрузки
FETCH_WORKERS = max(1, _env_int("FETCH_WORKERS", 1))
VERIFY_HTTPS_SSL = _env_bool("VERIFY_HTTPS_SSL", True)
USER_AGENT = _env(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
)

if not VERIFY_HTTPS_SSL:
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

# Распознавание base64: roundtrip (строгий, по умолчанию) | padded (с дополнением до кратности 4)
BASE64_STRATEGY = _env("BASE64_STRATEGY", "roundtrip").lower()
# Политика вложенных ссылок: permissive (любой http/https) | strict (расширение файла или хост из списка)
URL_POLICY = _env("URL_POLICY", "permissive").lower()
STRICT_URL_HOSTS = _parse_list(_env(
    "STRICT_URL_HOSTS",
    "raw.githubusercontent.com,gist.githubusercontent.com,pastebin.com,gitlab.com",
))

# Отбор конфигураций
PROTOCOL_PRIORITY = _env("PROTOCOL_PRIORITY", "")  # vless:5;trojan:0;hysteria2,hy2:0
PROTOCOLS = _parse_list(_env("PROTOCOLS", ""))  # all | vless,trojan
GLOBAL_CAP = _env_int("GLOBAL_CAP", 0)
CLOUDFLARE_ONLY = _env_bool("CLOUDFLARE_ONLY", False)
OUTPUT_FORMAT = _env("OUTPUT_FORMAT", "normal").lower()  # normal | base64
_seed = _env("SHUFFLE_SEED", "")
SHUFFLE_SEED = int(_seed) if _seed else None

# Вывод
OUTPUT_DIR = _env("OUTPUT_DIR", "output")
OUTPUT_FILE = _env("OUTPUT_FILE", "sub.txt")
# Добавлять к имени файла дату и источник
OUTPUT_ADD_DATE = _env_bool("OUTPUT_ADD_DATE", False)
EXPORT_FORMAT = _env("EXPORT_FORMAT", "txt").lower()  # txt, json, csv, all

# Логирование
LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()
LOG_FILE = _env("LOG_FILE", "")
LOG_MAX_SIZE = _env_int("LOG_MAX_SIZE", 10 * 1024 * 1024)  # 10MB
LOG_BACKUP_COUNT = _env_int("LOG_BACKUP_COUNT", 5)
