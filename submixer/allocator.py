#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль распределения конфигураций по протоколам.

Список приоритетов задаёт, какие протоколы попадают в результат, в каком порядке
и сколько конфигураций каждого взять. Алгоритм:
1. Один раз перемешиваем все конфигурации и раскладываем по группам протоколов
   (строки с незаявленным протоколом отбрасываются).
2. Проход 1: для групп с ограниченной квотой берём до quota строк, в порядке списка.
3. Проход 2: для групп без ограничения берём все оставшиеся строки, в том же порядке.
4. Если задан общий лимит - обрезаем результат до него.
"""

import random
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Sequence, Union

from .parsing import scheme_token as scheme_of


@dataclass(frozen=True)
class Quota:
    """Квота группы: limit=None - без ограничения, иначе положительное число."""

    limit: Optional[int] = None

    @classmethod
    def unlimited(cls) -> "Quota":
        return cls(None)

    @classmethod
    def bounded(cls, n: int) -> "Quota":
        if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
            raise ValueError(f"Квота должна быть положительным целым числом: {n!r}")
        return cls(n)

    @classmethod
    def from_count(cls, value) -> "Quota":
        """0, None и пустая строка - без ограничения; иначе целое число > 0."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.unlimited()
        try:
            n = int(value)
        except (TypeError, ValueError):
            raise ValueError(f"Некорректная квота: {value!r}") from None
        if n < 0:
            raise ValueError(f"Квота не может быть отрицательной: {value!r}")
        return cls.unlimited() if n == 0 else cls.bounded(n)

    @property
    def is_unlimited(self) -> bool:
        return self.limit is None


@dataclass(frozen=True)
class ProtocolPriority:
    """Группа протоколов (один или несколько синонимов) с квотой."""

    aliases: tuple[str, ...]
    quota: Quota = Quota()

    def __post_init__(self):
        aliases = tuple(a.strip().lower() for a in self.aliases if a and a.strip())
        if not aliases:
            raise ValueError("Группа протоколов должна содержать хотя бы одно имя")
        object.__setattr__(self, "aliases", aliases)

    @classmethod
    def from_names(cls, names: str, quota: Quota = Quota()) -> "ProtocolPriority":
        """'hysteria2,hy2' -> ProtocolPriority(('hysteria2', 'hy2'), quota)."""
        return cls(tuple(names.split(",")), quota)


PriorityInput = Union[str, Iterable[Union[ProtocolPriority, Mapping]]]


def parse_priority_list(value: PriorityInput) -> list[ProtocolPriority]:
    """
    Разбирает список приоритетов.
    Строка: "vless:5;trojan;hysteria2,hy2:0" (без числа - без ограничения).
    Список: ProtocolPriority или словари {"protocol": "hysteria2,hy2", "count": 5}.
    """
    if not value:
        return []
    if isinstance(value, str):
        entries = []
        for token in value.split(";"):
            token = token.strip()
            if not token:
                continue
            names, _, count = token.partition(":")
            entries.append(ProtocolPriority.from_names(names, Quota.from_count(count)))
        return entries
    entries = []
    for item in value:
        if isinstance(item, ProtocolPriority):
            entries.append(item)
            continue
        if not isinstance(item, Mapping):
            raise ValueError(f"Некорректный элемент списка приоритетов: {item!r}")
        names = item.get("protocol") or item.get("name") or ""
        entries.append(ProtocolPriority.from_names(str(names), Quota.from_count(item.get("count"))))
    return entries


def shuffle(items: Iterable[str], rng: Optional[random.Random] = None) -> list[str]:
    """Перемешивание Фишера-Йетса. Возвращает новый список, исходный не меняется."""
    rng = rng or random.Random()
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def group_by_protocol(
    configs: Iterable[str],
    priorities: Sequence[ProtocolPriority],
    rng: Optional[random.Random] = None,
) -> list[list[str]]:
    """
    Перемешивает конфигурации и раскладывает их по группам (индекс группы = индекс в priorities).
    Если имя протокола заявлено в нескольких группах, действует первая.
    """
    alias_to_group: dict[str, int] = {}
    for index, entry in enumerate(priorities):
        for alias in entry.aliases:
            alias_to_group.setdefault(alias, index)

    buckets: list[list[str]] = [[] for _ in priorities]
    for line in shuffle(configs, rng):
        group = alias_to_group.get(scheme_of(line) or "")
        if group is not None:
            buckets[group].append(line)
    return buckets


def allocate(
    configs: Iterable[str],
    priorities: Sequence[ProtocolPriority],
    global_cap: int = 0,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Отбирает конфигурации по квотам протоколов в порядке приоритета и применяет общий лимит."""
    if global_cap < 0:
        raise ValueError(f"Общий лимит не может быть отрицательным: {global_cap}")
    buckets = group_by_protocol(configs, priorities, rng)
    result: list[str] = []

    for entry, bucket in zip(priorities, buckets):
        if not entry.quota.is_unlimited:
            taken = bucket[:entry.quota.limit]
            del bucket[:entry.quota.limit]
            result.extend(taken)

    for entry, bucket in zip(priorities, buckets):
        if entry.quota.is_unlimited:
            result.extend(bucket)
            bucket.clear()

    if global_cap > 0 and len(result) > global_cap:
        result = result[:global_cap]
    return result
