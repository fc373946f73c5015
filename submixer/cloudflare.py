#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль определения конфигураций, работающих через домены Cloudflare Workers/Pages.
"""

import json
import logging
from urllib.parse import parse_qs, unquote, urlsplit

from .config import BASE64_STRATEGY
from .encoding import decode_base64, is_likely_base64

logger = logging.getLogger(__name__)

CLOUDFLARE_SUFFIXES = (".workers.dev", ".pages.dev")

# Параметры запроса, в которых может быть указан домен
_QUERY_HOST_KEYS = ("sni", "host", "peer")
# Поля JSON внутри base64 (vmess, ss)
_PAYLOAD_HOST_KEYS = ("add", "server", "host", "sni")
_PAYLOAD_SCHEMES = ("vmess", "ss")


def _payload_hosts(line: str, strategy: str) -> list[str]:
    """Домены из base64+JSON части vmess://... или ss://... (до #)."""
    encoded = line.split("://", 1)[1].split("#", 1)[0]
    if not is_likely_base64(encoded, strategy):
        return []
    try:
        data = json.loads(decode_base64(encoded))
    except (ValueError, RecursionError):
        return []
    if not isinstance(data, dict):
        return []
    return [data[k] for k in _PAYLOAD_HOST_KEYS if isinstance(data.get(k), str) and data[k]]


def candidate_hosts(line: str, strategy: str = BASE64_STRATEGY) -> list[str]:
    """
    Собирает все места, где в строке-конфигурации может быть домен:
    адрес сервера, параметры sni/host/peer, поля JSON в base64 для vmess/ss.
    При некорректной строке выбрасывает ValueError.
    """
    processed = unquote(line.replace("&amp;", "&"))
    parsed = urlsplit(processed)
    hosts = []
    if parsed.hostname:
        hosts.append(parsed.hostname)
    query = parse_qs(parsed.query, keep_blank_values=False)
    for key in _QUERY_HOST_KEYS:
        hosts.extend(query.get(key, []))
    if parsed.scheme.lower() in _PAYLOAD_SCHEMES and "://" in processed:
        hosts.extend(_payload_hosts(processed, strategy))
    return hosts


def is_edge_domain(host: str) -> bool:
    """Проверяет, оканчивается ли домен (без порта) на один из суффиксов Cloudflare."""
    name = host.strip().split(":", 1)[0].lower()
    return any(name.endswith(suffix) for suffix in CLOUDFLARE_SUFFIXES)


def filter_to_edge_domains(configs, strategy: str = BASE64_STRATEGY) -> list[str]:
    """
    Оставляет конфигурации, у которых хотя бы один домен принадлежит Cloudflare Workers/Pages.
    Порядок исходный, повторы убираются. Строки, которые не удалось разобрать, пропускаются.
    """
    result: dict[str, None] = {}
    for line in configs:
        if line in result:
            continue
        try:
            hosts = candidate_hosts(line, strategy)
        except (ValueError, IndexError, RecursionError) as e:
            logger.debug(f"Не удалось разобрать строку: {line[:80]} -> {e}")
            continue
        if any(is_edge_domain(h) for h in hosts):
            result[line] = None
    return list(result)
