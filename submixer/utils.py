#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль утилит: загрузка подписок по HTTP, чтение списков источников.
"""

from typing import Optional
from urllib.parse import urlparse

import requests

from .config import FETCH_TIMEOUT, USER_AGENT, VERIFY_HTTPS_SSL


def validate_url(url: str) -> None:
    """Проверяет URL перед загрузкой. При ошибке выбрасывает ValueError."""
    parsed = urlparse(url)
    if parsed.scheme.lower() not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"Некорректный URL: {url}")
    # Проверка на управляющие символы
    if any(ord(c) < 32 for c in url):
        raise ValueError(f"URL содержит управляющие символы: {url}")


def fetch_url(
    url: str,
    timeout: float = FETCH_TIMEOUT,
    verify_ssl: bool = VERIFY_HTTPS_SSL,
    user_agent: Optional[str] = USER_AGENT,
) -> requests.Response:
    """
    Загружает URL методом GET и возвращает ответ как есть (ok, status_code, text, headers).
    Статус ответа не проверяется - это делает вызывающий код.
    """
    validate_url(url)
    headers = {"User-Agent": user_agent} if user_agent else {}
    return requests.get(
        url, timeout=timeout, headers=headers,
        allow_redirects=True, verify=verify_ssl,
    )


def make_fetcher(timeout: float = FETCH_TIMEOUT, verify_ssl: bool = VERIFY_HTTPS_SSL):
    """Возвращает функцию fetch(url) с зафиксированными таймаутом и проверкой TLS."""
    def fetch(url: str) -> requests.Response:
        return fetch_url(url, timeout=timeout, verify_ssl=verify_ssl)
    return fetch


def load_urls_from_file(path: str) -> list[str]:
    """Читает файл с URL (по одному на строку), возвращает список непустых URL.
    Обрабатывает случаи, когда в строке несколько URL, разделенных пробелами."""
    urls = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            for part in line.split():
                part = part.strip()
                if part.lower().startswith(("http://", "https://", "ssconf://")):
                    urls.append(part)
    return urls
