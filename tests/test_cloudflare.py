#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import json

import pytest

from submixer.cloudflare import candidate_hosts, filter_to_edge_domains, is_edge_domain
from submixer.encoding import encode_base64


def _vmess(payload: dict) -> str:
    return "vmess://" + encode_base64(json.dumps(payload))


def test_vless_on_workers_domain_is_kept():
    line = "vless://uuid@foo.workers.dev:443?sni=bar.pages.dev"
    assert filter_to_edge_domains([line]) == [line]


def test_line_without_edge_domain_is_dropped():
    line = "vless://uuid@example.com:443?security=tls"
    assert filter_to_edge_domains([line]) == []


@pytest.mark.parametrize("line", [
    "vless://uuid@1.2.3.4:443?security=tls&sni=edge.pages.dev",
    "trojan://pass@1.2.3.4:443?type=ws&host=edge.workers.dev",
    "hysteria://1.2.3.4:443?peer=edge.workers.dev",
    "vless://uuid@1.2.3.4:443?security=tls&amp;host=edge.workers.dev",
    "vless://uuid@1.2.3.4:443?host=edge.workers.dev%3A8443",
    "vless://uuid@EDGE.WORKERS.DEV:443",
])
def test_edge_domain_found_in_query_or_host(line):
    assert filter_to_edge_domains([line]) == [line]


def test_vmess_payload_fields_are_checked():
    kept = _vmess({"add": "1.2.3.4", "port": "443", "host": "cdn.workers.dev", "ps": "x"})
    dropped = _vmess({"add": "1.2.3.4", "port": "443", "host": "example.com", "ps": "y"})
    assert filter_to_edge_domains([kept, dropped]) == [kept]


def test_ss_payload_server_field_is_checked():
    line = "ss://" + encode_base64(json.dumps({"server": "node.pages.dev", "server_port": 443})) + "#tag"
    assert "node.pages.dev" in candidate_hosts(line)
    assert filter_to_edge_domains([line]) == [line]


def test_suffix_must_match_at_end():
    line = "vless://uuid@workers.dev.evil.com:443?sni=pages.dev.example.org"
    assert filter_to_edge_domains([line]) == []


def test_unparseable_line_is_skipped_without_aborting():
    good = "vless://uuid@a.workers.dev:443"
    lines = ["vless://uuid@[::1:443", good]
    assert filter_to_edge_domains(lines) == [good]


def test_deeply_nested_vmess_payload_is_skipped():
    good = "vless://uuid@a.workers.dev:443"
    hostile = "vmess://" + encode_base64("[" * 100000 + "]" * 100000)
    assert filter_to_edge_domains([hostile, good]) == [good]


def test_input_order_is_kept_and_duplicates_removed():
    a = "vless://a@a.workers.dev:443"
    b = "trojan://b@b.pages.dev:443"
    c = "vless://c@example.com:443"
    assert filter_to_edge_domains([b, c, a, b]) == [b, a]


def test_is_edge_domain_strips_port_and_case():
    assert is_edge_domain("Foo.Pages.Dev:8443")
    assert not is_edge_domain("pagesXdev")
