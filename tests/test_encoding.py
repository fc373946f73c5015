#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import pytest

from submixer.encoding import (
    STRATEGY_PADDED,
    STRATEGY_ROUNDTRIP,
    decode_base64,
    decode_if_base64,
    encode_base64,
    is_likely_base64,
)


@pytest.mark.parametrize("text", [
    "vless://uuid@host:443?sni=a.b#name",
    "строка с кириллицей и эмодзи 🚀",
    "line1\r\nline2\nline3",
    "a",
])
def test_decode_inverts_encode(text):
    assert decode_base64(encode_base64(text)) == text


@pytest.mark.parametrize("strategy", [STRATEGY_ROUNDTRIP, STRATEGY_PADDED])
def test_encoded_text_is_detected(strategy):
    assert is_likely_base64(encode_base64("vmess://something\nss://other"), strategy)


@pytest.mark.parametrize("text", [
    "hello world",
    "vless://uuid@host:443",
    "https://example.com/sub.txt",
    "ключ: значение",
])
def test_plain_text_is_not_detected_by_roundtrip(text):
    assert not is_likely_base64(text, STRATEGY_ROUNDTRIP)


def test_empty_text_is_not_base64():
    assert not is_likely_base64("", STRATEGY_ROUNDTRIP)
    assert not is_likely_base64("   \n", STRATEGY_PADDED)


def test_padded_strategy_accepts_missing_padding():
    unpadded = encode_base64("ab").rstrip("=")
    assert not is_likely_base64(unpadded, STRATEGY_ROUNDTRIP)
    assert is_likely_base64(unpadded, STRATEGY_PADDED)


def test_padded_strategy_accepts_line_breaks():
    encoded = encode_base64("vless://a@b:1\n" * 20)
    wrapped = "\n".join(encoded[i:i + 76] for i in range(0, len(encoded), 76))
    assert is_likely_base64(wrapped, STRATEGY_PADDED)
    assert decode_if_base64(wrapped, STRATEGY_PADDED) == "vless://a@b:1\n" * 20


def test_unknown_strategy_raises():
    with pytest.raises(ValueError):
        is_likely_base64("YWJj", "magic")


def test_decode_accepts_urlsafe_alphabet():
    data = "??>>"
    encoded = encode_base64(data)
    assert "/" in encoded or "+" in encoded
    urlsafe = encoded.replace("+", "-").replace("/", "_").rstrip("=")
    assert decode_base64(urlsafe) == data


def test_decode_invalid_raises_value_error():
    with pytest.raises(ValueError):
        decode_base64("not base64 at all!")
    with pytest.raises(ValueError):
        decode_base64("")


def test_decode_if_base64_falls_back_on_invalid_utf8():
    # "////" проходит roundtrip, но раскодируется в байты 0xff
    assert is_likely_base64("////", STRATEGY_ROUNDTRIP)
    assert decode_if_base64("////", STRATEGY_ROUNDTRIP) == "////"


def test_decode_if_base64_returns_plain_text_unchanged():
    text = "vless://a@b:1\ntrojan://p@c:2"
    assert decode_if_base64(text) == text
