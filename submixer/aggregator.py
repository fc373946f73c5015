#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль сборки итоговой подписки: обход источников, фильтр Cloudflare,
отбор по протоколам и квотам, формирование текста (CRLF) или base64.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from .allocator import ProtocolPriority, Quota, allocate, parse_priority_list, shuffle
from .cloudflare import filter_to_edge_domains
from .config import MAX_DEPTH
from .crawler import Crawler, CrawlStats, InputKind
from .encoding import decode_base64, encode_base64

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\r\n"
OUTPUT_NORMAL = "normal"
OUTPUT_BASE64 = "base64"
OUTPUT_FORMATS = (OUTPUT_NORMAL, OUTPUT_BASE64)


class InvalidRequestError(ValueError):
    """Некорректные входные параметры запроса."""


@dataclass
class AggregationRequest:
    inputs: Union[str, Sequence[str]]
    kind: Union[InputKind, str] = InputKind.LINK
    output_format: str = OUTPUT_NORMAL
    priorities: Union[str, Sequence] = ()
    protocols: Sequence[str] = ()
    global_cap: int = 0
    cloudflare_only: bool = False
    max_depth: int = MAX_DEPTH


@dataclass
class AggregationResult:
    content: str
    lines: list[str]
    extracted: int
    stats: CrawlStats = field(default_factory=CrawlStats)


def split_url_param(value: Optional[str]) -> list[str]:
    """Параметр urls: ссылки через '|'."""
    if not value:
        return []
    return [u.strip() for u in value.split("|") if u.strip()]


def decode_file_payload(content: str) -> str:
    """Содержимое загруженного файла приходит в base64 - раскодируем в текст."""
    try:
        return decode_base64(content)
    except ValueError as e:
        raise InvalidRequestError(f"Некорректное содержимое файла (ожидается base64): {e}") from e


def priorities_from_protocols(protocols: Sequence[str]) -> list[ProtocolPriority]:
    """
    Простой фильтр протоколов: каждый протокол - группа без ограничения.
    Пустой список или ["all"] - без фильтра.
    """
    names = [p.strip().lower() for p in protocols or [] if p and p.strip()]
    if not names or names == ["all"]:
        return []
    return [ProtocolPriority((name,), Quota.unlimited()) for name in names]


def select_configs(
    configs: Sequence[str],
    priorities: Sequence[ProtocolPriority],
    global_cap: int = 0,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """С приоритетами - распределение по квотам; без них - перемешивание и общий лимит."""
    if priorities:
        return allocate(configs, priorities, global_cap, rng)
    lines = shuffle(configs, rng)
    if global_cap > 0 and len(lines) > global_cap:
        lines = lines[:global_cap]
    return lines


def render_output(lines: Sequence[str], output_format: str = OUTPUT_NORMAL) -> str:
    """Склеивает строки через CRLF; для base64 кодирует результат."""
    if output_format not in OUTPUT_FORMATS:
        raise InvalidRequestError(f"Неизвестный формат вывода: {output_format}")
    content = LINE_SEPARATOR.join(lines)
    if output_format == OUTPUT_BASE64:
        return encode_base64(content)
    return content


def _validate(request: AggregationRequest) -> tuple[InputKind, list[ProtocolPriority]]:
    try:
        kind = InputKind(request.kind)
    except ValueError:
        raise InvalidRequestError(f"Неизвестный тип входных данных: {request.kind}") from None
    if request.output_format not in OUTPUT_FORMATS:
        raise InvalidRequestError(f"Неизвестный формат вывода: {request.output_format}")
    if request.global_cap < 0:
        raise InvalidRequestError(f"Общий лимит не может быть отрицательным: {request.global_cap}")
    if not request.inputs or (isinstance(request.inputs, str) and not request.inputs.strip()):
        raise InvalidRequestError("Не заданы входные данные")
    if kind is not InputKind.LINK and not isinstance(request.inputs, str):
        raise InvalidRequestError("Для text/file ожидается строка")
    try:
        priorities = parse_priority_list(request.priorities)
    except ValueError as e:
        raise InvalidRequestError(str(e)) from e
    if not priorities:
        priorities = priorities_from_protocols(request.protocols)
    return kind, priorities


def aggregate(
    request: AggregationRequest,
    crawler: Optional[Crawler] = None,
    rng: Optional[random.Random] = None,
) -> AggregationResult:
    """Полный цикл обработки запроса."""
    kind, priorities = _validate(request)
    crawler = crawler or Crawler()

    configs = sorted(crawler.extract(request.inputs, kind, request.max_depth))
    extracted = len(configs)
    if request.cloudflare_only:
        configs = filter_to_edge_domains(configs)
        logger.info(f"Cloudflare: осталось {len(configs)} из {extracted}")

    lines = select_configs(configs, priorities, request.global_cap, rng)
    return AggregationResult(
        content=render_output(lines, request.output_format),
        lines=lines,
        extracted=extracted,
        stats=crawler.state.stats,
    )
