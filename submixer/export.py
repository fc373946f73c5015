#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Модуль экспорта результатов в различные форматы.
"""

import csv
import json
import os
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

from .allocator import scheme_of
from .cloudflare import filter_to_edge_domains
from .config import OUTPUT_ADD_DATE, OUTPUT_DIR, OUTPUT_FILE
from .crawler import CrawlStats


def get_source_name(url_or_path: str) -> str:
    """Имя источника: последний сегмент URL path или basename файла без расширения."""
    if url_or_path.startswith("http://") or url_or_path.startswith("https://"):
        path = urlparse(url_or_path).path.rstrip("/")
        return path.split("/")[-1] if path else "list"
    return os.path.splitext(os.path.basename(url_or_path))[0] or "list"


def get_output_path(source: str) -> str:
    """Путь к файлу результата: OUTPUT_DIR/OUTPUT_FILE; при OUTPUT_ADD_DATE - база + (источник_ДДММГГГГ).txt."""
    base, ext = os.path.splitext(OUTPUT_FILE)
    base = base or "sub"
    ext = ext or ".txt"
    if OUTPUT_ADD_DATE:
        date = datetime.now().strftime("%d%m%Y")
        name = f"{base} ({get_source_name(source)}_{date}){ext}"
    else:
        name = f"{base}{ext}"
    return os.path.join(OUTPUT_DIR, name) if OUTPUT_DIR else name


def export_to_txt(content: str, output_path: str) -> str:
    """Сохраняет итоговую подписку как есть (CRLF или base64)."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        f.write(content)
    return output_path


def export_to_json(lines: list[str], stats: CrawlStats, extracted: int, output_path: str) -> str:
    """Экспорт результатов в JSON."""
    data = {
        'timestamp': datetime.now().isoformat(),
        'extracted': extracted,
        'total': len(lines),
        'stats': stats.to_dict(),
        'configs': lines,
    }
    json_path = os.path.splitext(output_path)[0] + '.json'
    Path(json_path).parent.mkdir(parents=True, exist_ok=True)
    with open(json_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    return json_path


def export_to_csv(lines: list[str], output_path: str) -> str:
    """Экспорт результатов в CSV: протокол, признак Cloudflare, строка."""
    csv_path = os.path.splitext(output_path)[0] + '.csv'
    Path(csv_path).parent.mkdir(parents=True, exist_ok=True)
    edge = set(filter_to_edge_domains(lines))
    with open(csv_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=['protocol', 'cloudflare', 'config'])
        writer.writeheader()
        for line in lines:
            writer.writerow({
                'protocol': scheme_of(line) or '',
                'cloudflare': line in edge,
                'config': line,
            })
    return csv_path
