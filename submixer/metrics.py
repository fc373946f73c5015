#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль статистики обхода и итоговой подписки.
"""

from collections import Counter
from typing import Optional

from rich.console import Console
from rich.table import Table

from .allocator import scheme_of
from .crawler import CrawlStats

console = Console()


def protocol_distribution(lines) -> dict[str, int]:
    """Количество строк по протоколам, по убыванию."""
    counts = Counter(scheme_of(line) or "unknown" for line in lines)
    return dict(counts.most_common())


def print_statistics_table(stats: CrawlStats, extracted: int, lines: list[str], out: Optional[Console] = None):
    """Выводит таблицу со статистикой."""
    table = Table(title="[bold green]Результаты сбора[/bold green]")
    table.add_column("Метрика", style="cyan", width=28)
    table.add_column("Значение", style="magenta", justify="right", width=12)

    table.add_row("Загружено источников", f"{stats.fetched:,}".replace(',', ' '))
    table.add_row("Ошибок загрузки", f"[red]{stats.failed:,}[/red]".replace(',', ' '))
    table.add_row("Вложенных подписок", str(stats.pointers))
    if stats.skipped_depth:
        table.add_row("Пропущено по глубине", str(stats.skipped_depth))
    if stats.skipped_budget:
        table.add_row("Пропущено по лимиту", str(stats.skipped_budget))
    table.add_row("Найдено конфигураций", f"{extracted:,}".replace(',', ' '))
    table.add_row("В итоговой подписке", f"[green]{len(lines):,}[/green]".replace(',', ' '))
    for protocol, count in protocol_distribution(lines).items():
        table.add_row(f"  {protocol}", str(count))

    (out or console).print(table)
