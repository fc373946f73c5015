#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль распознавания содержимого подписок: строки-конфигурации прокси (vless://, vmess://, ss:// и др.),
вложенные подписки (http/https и ssconf://) и JSON-описания Shadowsocks.
"""

import json
import os
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import quote, urlparse

from .config import BASE64_STRATEGY, STRICT_URL_HOSTS, URL_POLICY
from .encoding import decode_if_base64, encode_base64


class Scheme(str, Enum):
    """Известные схемы строк-конфигураций."""

    VLESS = "vless"
    VMESS = "vmess"
    SS = "ss"
    SSR = "ssr"
    TROJAN = "trojan"
    SNELL = "snell"
    MIERU = "mieru"
    ANYTLS = "anytls"
    HYSTERIA = "hysteria"
    HYSTERIA2 = "hysteria2"
    TUIC = "tuic"
    WIREGUARD = "wireguard"
    SSH = "ssh"
    JUICITY = "juicity"
    WARP = "warp"
    SOCKS5 = "socks5"
    MTPROTO = "mtproto"


# Токен схемы -> Scheme (включая синонимы)
SCHEME_LOOKUP: dict[str, Scheme] = {s.value: s for s in Scheme}
SCHEME_LOOKUP["hy2"] = Scheme.HYSTERIA2

# Символы, которые не экранируются в теге (как encodeURIComponent)
_TAG_SAFE = "!~*'()"

URL_POLICY_PERMISSIVE = "permissive"
URL_POLICY_STRICT = "strict"
URL_POLICIES = (URL_POLICY_PERMISSIVE, URL_POLICY_STRICT)

# Расширения, по которым строгая политика принимает вложенную ссылку
_STRICT_URL_EXTENSIONS = (".txt", ".csv", ".yaml", ".yml")

_SCHEME_RE = re.compile(r"^([a-z0-9]+)://", re.IGNORECASE)
_SSCONF_RE = re.compile(r"^ssconf://", re.IGNORECASE)
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)


@dataclass
class BlockResult:
    """Результат разбора одного блока: найденные конфигурации и ссылки на вложенные подписки."""

    configs: list[str] = field(default_factory=list)
    pointers: list[str] = field(default_factory=list)


def scheme_token(line: str) -> Optional[str]:
    """Возвращает схему строки в нижнем регистре (vless, hy2, https...) или None."""
    m = _SCHEME_RE.match(line)
    return m.group(1).lower() if m else None


def match_scheme(line: str) -> Optional[Scheme]:
    """Определяет известную схему конфигурации по префиксу строки."""
    token = scheme_token(line)
    if token is None:
        return None
    return SCHEME_LOOKUP.get(token)


def replace_ssconf(line: str) -> str:
    """ssconf://host/path -> https://host/path (заменяется только схема)."""
    return _SSCONF_RE.sub("https://", line, count=1)


def github_blob_to_raw(url: str) -> str:
    """Ссылку на страницу файла GitHub (github.com/.../blob/...) переводит в raw.githubusercontent.com."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return url
    host = (parsed.hostname or "").lower()
    if host not in ("github.com", "www.github.com") or "/blob/" not in parsed.path:
        return url
    path = parsed.path.replace("/blob/", "/", 1)
    return parsed._replace(netloc="raw.githubusercontent.com", path=path).geturl()


def is_subscription_url(url: str, policy: str = URL_POLICY, allowed_hosts: Optional[list[str]] = None) -> bool:
    """
    Решает, ставить ли http/https ссылку в очередь обхода.
    permissive: любая ссылка. strict: путь заканчивается на .txt/.csv/.yaml/.yml
    или хост входит в список известных хостингов контента.
    """
    if policy == URL_POLICY_PERMISSIVE:
        return True
    if policy != URL_POLICY_STRICT:
        raise ValueError(f"Неизвестная политика ссылок: {policy}")
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if os.path.splitext(parsed.path.lower())[1] in _STRICT_URL_EXTENSIONS:
        return True
    hosts = STRICT_URL_HOSTS if allowed_hosts is None else allowed_hosts
    host = (parsed.hostname or "").lower()
    return any(host == h.lower() or host.endswith("." + h.lower()) for h in hosts)


def _port_to_int(value) -> Optional[int]:
    """Порт 1-65535; дробные числа, 0 и bool не принимаются."""
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        port = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return port if 0 < port < 65536 else None


def convert_json_to_ss_link(obj) -> Optional[str]:
    """
    Преобразует JSON-описание Shadowsocks {method, password, server, server_port, tag}
    в ss://base64(method:password)@server:port#tag. Тег по умолчанию - "server:port".
    Возвращает None, если объект не подходит.
    """
    if not isinstance(obj, dict):
        return None
    method = obj.get("method")
    password = obj.get("password")
    server = obj.get("server")
    if not method or not password or not server:
        return None
    port = _port_to_int(obj.get("server_port"))
    if port is None:
        return None
    tag = obj.get("tag") or f"{server}:{port}"
    credentials = encode_base64(f"{method}:{password}")
    return f"ss://{credentials}@{server}:{port}#{quote(str(tag), safe=_TAG_SAFE)}"


def _json_ss_links(text: str) -> list[str]:
    """Пробует разобрать блок как JSON (объект или массив объектов) и сконвертировать в ss:// ссылки."""
    try:
        parsed = json.loads(text)
    except (ValueError, RecursionError):
        return []
    items = parsed if isinstance(parsed, list) else [parsed]
    links = []
    for item in items:
        link = convert_json_to_ss_link(item)
        if link:
            links.append(link)
    return links


def recognize_block(
    text: str,
    url_policy: str = URL_POLICY,
    strategy: str = BASE64_STRATEGY,
) -> BlockResult:
    """
    Разбирает блок контента подписки: при необходимости декодирует base64,
    конвертирует JSON Shadowsocks, затем классифицирует каждую строку.
    Ссылки ssconf:// возвращаются уже переписанными на https://.
    """
    result = BlockResult()
    if not text or not text.strip():
        return result
    content = decode_if_base64(text, strategy)

    result.configs.extend(_json_ss_links(content))

    for line in content.splitlines():
        line = line.strip()
        if not line:
            continue
        if match_scheme(line) is not None:
            result.configs.append(line)
        elif _SSCONF_RE.match(line):
            result.pointers.append(replace_ssconf(line))
        elif _HTTP_RE.match(line):
            if is_subscription_url(line, url_policy):
                result.pointers.append(line)
    return result
