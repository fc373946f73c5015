#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import base64
import json

import pytest

from submixer.encoding import encode_base64
from submixer.parsing import (
    Scheme,
    URL_POLICY_PERMISSIVE,
    URL_POLICY_STRICT,
    convert_json_to_ss_link,
    github_blob_to_raw,
    is_subscription_url,
    match_scheme,
    recognize_block,
    replace_ssconf,
)

ALL_TOKENS = [
    "vless", "vmess", "ss", "ssr", "trojan", "snell", "mieru", "anytls", "hysteria",
    "hysteria2", "hy2", "tuic", "wireguard", "ssh", "juicity", "warp", "socks5", "mtproto",
]


@pytest.mark.parametrize("token", ALL_TOKENS)
def test_known_schemes_are_recognized(token):
    assert match_scheme(f"{token}://payload") is not None
    assert match_scheme(f"{token.upper()}://payload") is not None


def test_hy2_is_alias_of_hysteria2():
    assert match_scheme("hy2://auth@host:443") is Scheme.HYSTERIA2


@pytest.mark.parametrize("line", [
    "socks://host:1080",
    "http://example.com",
    "vless:/missing-slash",
    "# comment vless://a@b:1",
    "",
])
def test_unknown_lines_are_not_configs(line):
    assert match_scheme(line) is None


def test_json_descriptor_converts_with_default_tag():
    obj = {"method": "aes-256-gcm", "password": "p", "server": "h", "server_port": 8388}
    creds = base64.b64encode(b"aes-256-gcm:p").decode()
    assert convert_json_to_ss_link(obj) == f"ss://{creds}@h:8388#h%3A8388"


def test_json_descriptor_uses_tag_and_string_port():
    obj = {"method": "chacha20-ietf-poly1305", "password": "secret", "server": "1.2.3.4",
           "server_port": "443", "tag": "my node/1"}
    link = convert_json_to_ss_link(obj)
    assert link.startswith("ss://")
    assert link.endswith("@1.2.3.4:443#my%20node%2F1")


@pytest.mark.parametrize("obj", [
    {"method": "aes-256-gcm", "password": "", "server": "h", "server_port": 1},
    {"method": "aes-256-gcm", "password": "p", "server_port": 1},
    {"method": "aes-256-gcm", "password": "p", "server": "h", "server_port": "abc"},
    {"method": "aes-256-gcm", "password": "p", "server": "h"},
    ["not", "an", "object"],
    "string",
])
def test_json_descriptor_that_does_not_qualify_is_skipped(obj):
    assert convert_json_to_ss_link(obj) is None


@pytest.mark.parametrize("port", [0, -1, 70000, 8388.9, float("inf"), float("nan"), True, "8388.0"])
def test_json_descriptor_with_invalid_port_is_skipped(port):
    obj = {"method": "aes-256-gcm", "password": "p", "server": "h", "server_port": port}
    assert convert_json_to_ss_link(obj) is None


def test_json_descriptor_accepts_integral_float_port():
    obj = {"method": "aes-256-gcm", "password": "p", "server": "h", "server_port": 8388.0}
    assert convert_json_to_ss_link(obj).endswith("@h:8388#h%3A8388")


def test_recognize_block_survives_hostile_json():
    infinite_port = '{"method":"aes-256-gcm","password":"p","server":"h","server_port":Infinity}'
    assert recognize_block(infinite_port).configs == []
    assert recognize_block("[" * 100000 + "]" * 100000).configs == []


def test_replace_ssconf_rewrites_only_scheme():
    assert replace_ssconf("ssconf://host.com/ssconf://x") == "https://host.com/ssconf://x"
    assert replace_ssconf("SSConf://host.com/key") == "https://host.com/key"


@pytest.mark.parametrize("url,expected", [
    ("https://github.com/user/repo/blob/main/sub.txt",
     "https://raw.githubusercontent.com/user/repo/main/sub.txt"),
    ("https://github.com/user/repo/tree/main", "https://github.com/user/repo/tree/main"),
    ("https://example.com/blob/main/sub.txt", "https://example.com/blob/main/sub.txt"),
])
def test_github_blob_to_raw(url, expected):
    assert github_blob_to_raw(url) == expected


def test_strict_policy_checks_extension_or_host():
    hosts = ["raw.githubusercontent.com"]
    assert is_subscription_url("https://example.com/list.TXT", URL_POLICY_STRICT, hosts)
    assert is_subscription_url("https://example.com/clash.yaml?x=1", URL_POLICY_STRICT, hosts)
    assert is_subscription_url("https://raw.githubusercontent.com/u/r/main/sub", URL_POLICY_STRICT, hosts)
    assert not is_subscription_url("https://example.com/page", URL_POLICY_STRICT, hosts)
    assert is_subscription_url("https://example.com/page", URL_POLICY_PERMISSIVE, hosts)


def test_recognize_block_classifies_lines():
    text = "\n".join([
        "  vless://uuid@host:443?sni=a#v1  ",
        "TROJAN://pass@host:443#t1",
        "ssconf://s3.example.com/key.json",
        "https://example.com/sub.txt",
        "just some text",
        "",
        "# comment",
    ])
    block = recognize_block(text)
    assert block.configs == ["vless://uuid@host:443?sni=a#v1", "TROJAN://pass@host:443#t1"]
    assert block.pointers == ["https://s3.example.com/key.json", "https://example.com/sub.txt"]


def test_recognize_block_decodes_base64_content():
    text = encode_base64("vmess://abc\r\nss://def@h:1")
    block = recognize_block(text)
    assert block.configs == ["vmess://abc", "ss://def@h:1"]
    assert block.pointers == []


def test_recognize_block_converts_json_array():
    data = [
        {"method": "aes-128-gcm", "password": "a", "server": "s1", "server_port": 1, "tag": "one"},
        {"name": "not a shadowsocks object"},
        {"method": "aes-128-gcm", "password": "b", "server": "s2", "server_port": 2},
    ]
    block = recognize_block(json.dumps(data, indent=2))
    assert len(block.configs) == 2
    assert block.configs[0].endswith("@s1:1#one")
    assert block.configs[1].endswith("@s2:2#s2%3A2")


def test_recognize_block_strict_policy_skips_plain_pages():
    block = recognize_block("https://example.com/page\nhttps://example.com/a.yml",
                            url_policy=URL_POLICY_STRICT)
    assert block.pointers == ["https://example.com/a.yml"]


def test_recognize_empty_block():
    block = recognize_block("   ")
    assert block.configs == [] and block.pointers == []
