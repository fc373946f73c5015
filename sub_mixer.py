#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Сборщик подписок прокси (vless://, vmess://, ss://, trojan:// и др.).
Загружает подписки по ссылкам (или читает текст/файл), рекурсивно обходит вложенные
подписки, отбирает конфигурации по протоколам и квотам и сохраняет итоговую подписку.
"""

import os
import random
import sys

from rich.console import Console

from submixer import signals
from submixer.aggregator import AggregationRequest, InvalidRequestError, aggregate, decode_file_payload
from submixer.config import (
    CLOUDFLARE_ONLY,
    EXPORT_FORMAT,
    GLOBAL_CAP,
    LINKS_FILE,
    MAX_DEPTH,
    MODE,
    OUTPUT_FORMAT,
    PROTOCOL_PRIORITY,
    PROTOCOLS,
    SHUFFLE_SEED,
)
from submixer.config_display import print_current_config
from submixer.crawler import Crawler, InputKind
from submixer.export import export_to_csv, export_to_json, export_to_txt, get_output_path
from submixer.logger_config import setup_logging
from submixer.metrics import print_statistics_table
from submixer.utils import load_urls_from_file

console = Console()


def _read_inputs(kind: InputKind, args: list[str]):
    """Исходные данные для выбранного режима."""
    if kind is InputKind.LINK:
        if args:
            return args
        script_dir = os.path.dirname(os.path.abspath(__file__))
        links_path = LINKS_FILE if os.path.isfile(LINKS_FILE) else os.path.join(script_dir, LINKS_FILE)
        if not os.path.isfile(links_path):
            raise InvalidRequestError(f"файл со ссылками не найден: {links_path}")
        return load_urls_from_file(links_path)
    if not args:
        raise InvalidRequestError(f"для режима {kind.value} укажите путь к файлу")
    parts = []
    for path in args:
        with open(path, encoding="utf-8") as f:
            content = f.read()
        parts.append(decode_file_payload(content) if kind is InputKind.FILE else content)
    return "\n".join(parts)


def main():
    args = [a for a in sys.argv[1:] if a.startswith("-")]
    sources = [a for a in sys.argv[1:] if not a.startswith("-")]
    to_stdout = "--stdout" in args
    print_config = "--print-config" in args or "-p" in args

    # При --stdout в stdout пишется только подписка, остальное - в stderr
    out = Console(stderr=True) if to_stdout else console
    setup_logging(stream=sys.stderr if to_stdout else None)

    try:
        kind = InputKind(MODE)
    except ValueError:
        out.print(f"[bold red]Ошибка:[/bold red] неизвестный режим MODE={MODE} (link, text, file)")
        sys.exit(1)

    print_current_config(sources or [LINKS_FILE], out=out)
    if print_config:
        sys.exit(0)

    try:
        inputs = _read_inputs(kind, sources)
    except (InvalidRequestError, OSError, ValueError) as e:
        out.print(f"[bold red]Ошибка чтения исходных данных:[/bold red] {e}")
        sys.exit(1)

    output_path = get_output_path(sources[0] if sources else LINKS_FILE)
    crawler = Crawler()
    signals.register(crawler, output_path)
    rng = random.Random(SHUFFLE_SEED) if SHUFFLE_SEED is not None else None

    request = AggregationRequest(
        inputs=inputs,
        kind=kind,
        output_format=OUTPUT_FORMAT,
        priorities=PROTOCOL_PRIORITY,
        protocols=PROTOCOLS,
        global_cap=GLOBAL_CAP,
        cloudflare_only=CLOUDFLARE_ONLY,
        max_depth=MAX_DEPTH,
    )
    try:
        with out.status("[cyan]Сбор конфигураций...[/cyan]"):
            result = aggregate(request, crawler=crawler, rng=rng)
    except InvalidRequestError as e:
        out.print(f"[bold red]Ошибка:[/bold red] {e}")
        sys.exit(1)

    print_statistics_table(result.stats, result.extracted, result.lines, out=out)

    if not result.lines:
        out.print("[yellow]Конфигураций не найдено.[/yellow]")
        sys.exit(0)

    if to_stdout:
        sys.stdout.write(result.content + "\n")
        return

    written = [export_to_txt(result.content, output_path)]
    if EXPORT_FORMAT in ("json", "all"):
        written.append(export_to_json(result.lines, result.stats, result.extracted, output_path))
    if EXPORT_FORMAT in ("csv", "all"):
        written.append(export_to_csv(result.lines, output_path))
    for path in written:
        out.print(f"[green]✓[/green] Сохранено: {path}")


if __name__ == "__main__":
    main()
