#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль обхода подписок: очередь URL с ограничением глубины, защитой от повторов
и сбором всех найденных конфигураций.

Очередь обрабатывается строго по порядку (FIFO, список с курсором). Задача с глубиной
>= max_depth отбрасывается без загрузки. Ошибка загрузки одного источника не прерывает обход.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional, Union

from .config import BASE64_STRATEGY, FETCH_WORKERS, MAX_DEPTH, MAX_FETCHES, URL_POLICY
from .logger_config import shorten_error
from .parsing import github_blob_to_raw, recognize_block, replace_ssconf
from .utils import make_fetcher

logger = logging.getLogger(__name__)


class InputKind(str, Enum):
    LINK = "link"
    TEXT = "text"
    FILE = "file"


@dataclass(frozen=True)
class CrawlTask:
    url: str
    depth: int


@dataclass
class CrawlStats:
    attempted: int = 0
    fetched: int = 0
    failed: int = 0
    skipped_depth: int = 0
    skipped_budget: int = 0
    pointers: int = 0
    configs: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class CrawlerState:
    """Состояние одного обхода: найденные конфигурации, посещённые URL, очередь и курсор."""

    configs: set[str] = field(default_factory=set)
    visited: set[str] = field(default_factory=set)
    queue: list[CrawlTask] = field(default_factory=list)
    cursor: int = 0
    stats: CrawlStats = field(default_factory=CrawlStats)

    def enqueue(self, url: str, depth: int) -> bool:
        """Ставит URL в очередь, если он ещё не встречался. Возвращает True, если поставлен."""
        if url in self.visited:
            return False
        self.visited.add(url)
        self.queue.append(CrawlTask(url, depth))
        return True

    def next_batch(self) -> list[CrawlTask]:
        """Забирает все задачи от курсора до текущего конца очереди."""
        batch = self.queue[self.cursor:]
        self.cursor = len(self.queue)
        return batch


def normalize_initial_url(url: str) -> str:
    """Нормализация исходной ссылки: ssconf:// -> https://, GitHub blob -> raw."""
    return github_blob_to_raw(replace_ssconf(url.strip()))


class Crawler:
    """
    Обходит исходные данные и вложенные подписки, собирая конфигурации.

    fetch(url) должен возвращать объект с атрибутами ok и text (например, requests.Response)
    или выбрасывать исключение. Любое исключение или ответ с ok=False - пропуск источника.
    """

    def __init__(
        self,
        fetch: Optional[Callable[[str], object]] = None,
        max_depth: int = MAX_DEPTH,
        max_fetches: int = MAX_FETCHES,
        workers: int = FETCH_WORKERS,
        url_policy: str = URL_POLICY,
        strategy: str = BASE64_STRATEGY,
    ):
        self.fetch = fetch or make_fetcher()
        self.max_depth = max_depth
        self.max_fetches = max_fetches
        self.workers = max(1, workers)
        self.url_policy = url_policy
        self.strategy = strategy
        self.state = CrawlerState()

    def extract(
        self,
        initial_input: Union[str, Iterable[str]],
        kind: Union[InputKind, str] = InputKind.LINK,
        max_depth: Optional[int] = None,
    ) -> set[str]:
        """
        Собирает все конфигурации из исходных данных.
        link - одна ссылка или список ссылок; text/file - уже раскодированный текст.
        """
        kind = InputKind(kind)
        depth_limit = self.max_depth if max_depth is None else max_depth
        self.state = state = CrawlerState()

        if kind is InputKind.LINK:
            urls = [initial_input] if isinstance(initial_input, str) else list(initial_input or [])
            for url in urls:
                if url and url.strip():
                    state.enqueue(normalize_initial_url(url), 0)
        else:
            try:
                self._process_block(initial_input or "", 0)
            except Exception as e:
                logger.warning(f"Не удалось разобрать входной текст: {shorten_error(e)}")

        while True:
            batch = state.next_batch()
            if not batch:
                break
            runnable = self._select_runnable(batch, depth_limit)
            bodies = self._fetch_batch(runnable)
            for task, body in zip(runnable, bodies):
                if body is None:
                    state.stats.failed += 1
                    continue
                state.stats.fetched += 1
                try:
                    self._process_block(body, task.depth)
                except Exception as e:
                    state.stats.failed += 1
                    logger.warning(f"Пропуск источника: {task.url} -> {shorten_error(e)}")

        logger.info(
            f"Обход завершён: загружено {state.stats.fetched}, ошибок {state.stats.failed}, "
            f"конфигураций {len(state.configs)}"
        )
        return set(state.configs)

    def _select_runnable(self, batch: list[CrawlTask], depth_limit: int) -> list[CrawlTask]:
        """Отбрасывает задачи сверх глубины и сверх лимита загрузок."""
        stats = self.state.stats
        runnable = []
        for task in batch:
            if task.depth >= depth_limit:
                stats.skipped_depth += 1
                logger.debug(f"Превышена глубина ({depth_limit}): {task.url}")
                continue
            if self.max_fetches and stats.attempted >= self.max_fetches:
                stats.skipped_budget += 1
                logger.debug(f"Исчерпан лимит загрузок ({self.max_fetches}): {task.url}")
                continue
            stats.attempted += 1
            runnable.append(task)
        return runnable

    def _fetch_batch(self, tasks: list[CrawlTask]) -> list[Optional[str]]:
        if self.workers == 1 or len(tasks) <= 1:
            return [self._fetch_one(task) for task in tasks]
        # Загрузки параллельно, разбор ответов - по порядку в вызывающем потоке
        with ThreadPoolExecutor(max_workers=min(self.workers, len(tasks))) as executor:
            return list(executor.map(self._fetch_one, tasks))

    def _fetch_one(self, task: CrawlTask) -> Optional[str]:
        """Загружает один URL. При ошибке пишет в лог и возвращает None."""
        try:
            response = self.fetch(task.url)
            if not response.ok:
                logger.warning(f"Пропуск источника: {task.url} -> HTTP {getattr(response, 'status_code', '?')}")
                return None
            return response.text
        except Exception as e:
            logger.warning(f"Пропуск источника: {task.url} -> {shorten_error(e)}")
            return None

    def _process_block(self, text: str, depth: int) -> None:
        state = self.state
        block = recognize_block(text, url_policy=self.url_policy, strategy=self.strategy)
        state.configs.update(block.configs)
        state.stats.configs = len(state.configs)
        for url in block.pointers:
            if state.enqueue(url, depth + 1):
                state.stats.pointers += 1
