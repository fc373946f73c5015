#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль обработки сигналов прерывания (Ctrl+C).
"""

import logging
import signal
import sys
from typing import Optional

from rich.console import Console

from .aggregator import LINE_SEPARATOR
from .crawler import Crawler

console = Console()

# Текущий обход и путь результата - для сохранения частичных результатов
active_crawler: Optional[Crawler] = None
output_path_global: str = ""


def signal_handler(signum, frame):
    """Обработчик сигналов прерывания."""
    console.print("\n\n[bold yellow][!][/bold yellow] Получен сигнал прерывания. Завершение работы...")
    save_partial_results()
    sys.exit(0)


def save_partial_results():
    """Сохраняет конфигурации, найденные до прерывания."""
    if active_crawler is None or not output_path_global:
        return
    configs = sorted(active_crawler.state.configs)
    if not configs:
        return
    partial_path = output_path_global.replace('.txt', '_partial.txt')
    try:
        with open(partial_path, 'w', encoding='utf-8', newline='') as f:
            f.write(LINE_SEPARATOR.join(configs))
        console.print(f"[green]✓[/green] Промежуточные результаты сохранены в: {partial_path}")
    except OSError as e:
        logging.getLogger(__name__).error(f"Ошибка сохранения промежуточных результатов: {e}")


def register(crawler: Crawler, output_path: str) -> None:
    """Регистрирует обработчики сигналов для текущего обхода."""
    global active_crawler, output_path_global
    active_crawler = crawler
    output_path_global = output_path
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)
