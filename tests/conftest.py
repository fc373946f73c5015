#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import threading
from dataclasses import dataclass, field

import pytest


@dataclass
class FakeResponse:
    status_code: int = 200
    text: str = ""
    headers: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


class FakeFetch:
    """
    Подмена загрузки: routes - URL -> тело (str), код ответа (int) или исключение.
    Неизвестный URL - 404. Все вызовы записываются в calls.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, url: str) -> FakeResponse:
        with self._lock:
            self.calls.append(url)
        value = self.routes.get(url, 404)
        if isinstance(value, BaseException):
            raise value
        if isinstance(value, int):
            return FakeResponse(status_code=value)
        return FakeResponse(text=value)


@pytest.fixture
def fake_fetch():
    return FakeFetch()
