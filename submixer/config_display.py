#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль отображения конфигурации.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import (
    BASE64_STRATEGY,
    CLOUDFLARE_ONLY,
    EXPORT_FORMAT,
    FETCH_TIMEOUT,
    FETCH_WORKERS,
    GLOBAL_CAP,
    MAX_DEPTH,
    MAX_FETCHES,
    MODE,
    OUTPUT_FORMAT,
    PROTOCOL_PRIORITY,
    PROTOCOLS,
    SHUFFLE_SEED,
    URL_POLICY,
)
from .export import get_output_path

console = Console()


def print_current_config(sources: list[str], out: Optional[Console] = None) -> None:
    """Выводит текущие параметры в понятном формате перед стартом."""
    output_path = get_output_path(sources[0] if sources else "")
    sources_display = ", ".join(sources[:3]) + ("..." if len(sources) > 3 else "")

    config_table = Table(show_header=False, box=None, padding=(0, 1))
    config_table.add_row("[cyan]Режим[/cyan]", f"[bold]{MODE}[/bold]")
    config_table.add_row("[cyan]Источники[/cyan]", sources_display or "не заданы")
    config_table.add_row("[cyan]Файл результата[/cyan]", output_path)
    config_table.add_row("[cyan]Глубина обхода[/cyan]", str(MAX_DEPTH))
    config_table.add_row("[cyan]Лимит загрузок[/cyan]", str(MAX_FETCHES) if MAX_FETCHES else "нет")
    config_table.add_row("[cyan]Таймаут загрузки[/cyan]", f"{FETCH_TIMEOUT} с")
    config_table.add_row("[cyan]Потоков загрузки[/cyan]", str(FETCH_WORKERS))
    config_table.add_row("[cyan]Политика ссылок[/cyan]", URL_POLICY)
    config_table.add_row("[cyan]Распознавание base64[/cyan]", BASE64_STRATEGY)
    if PROTOCOL_PRIORITY:
        config_table.add_row("[cyan]Приоритет протоколов[/cyan]", PROTOCOL_PRIORITY)
    elif PROTOCOLS:
        config_table.add_row("[cyan]Протоколы[/cyan]", ", ".join(PROTOCOLS))
    if GLOBAL_CAP > 0:
        config_table.add_row("[cyan]Общий лимит[/cyan]", str(GLOBAL_CAP))
    if CLOUDFLARE_ONLY:
        config_table.add_row("[cyan]Только Cloudflare[/cyan]", "[green]включено[/green]")
    if SHUFFLE_SEED is not None:
        config_table.add_row("[cyan]Seed перемешивания[/cyan]", str(SHUFFLE_SEED))
    config_table.add_row("[cyan]Формат вывода[/cyan]", OUTPUT_FORMAT)
    config_table.add_row("[cyan]Экспорт[/cyan]", EXPORT_FORMAT)

    out = out or console
    out.print(Panel(config_table, title="[bold cyan]Параметры сбора[/bold cyan]", border_style="cyan"))
    out.print()
