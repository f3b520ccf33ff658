#!/usr/bin/env python3
"""
Tests for StreamingClient text streaming and error mapping.
"""

import sys
import os

# Add parent directory to path to import our modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest
import requests

from providers.openai import map_events
from streaming_client import StreamingClient, UpstreamError


def _make_iter_lines(frames):
    def _iter_lines(url, json=None, headers=None):
        for line in frames:
            if isinstance(line, Exception):
                raise line
            yield line
    return _iter_lines


FRAMES = [
    '{"id":"x","object":"chat.completion.chunk","model":"gpt-4o","choices":[{"index":0,"delta":{"role":"assistant","content":"Intro\\n"},"finish_reason":null}]}',
    '{"id":"z1","object":"chat.completion.chunk","model":"gpt-4o","choices":[{"index":0,"delta":{"content":"```py a.py\\n"},"finish_reason":null}]}',
    '{"id":"z2","object":"chat.completion.chunk","model":"gpt-4o","choices":[{"index":0,"delta":{"content":"print(\\"hi\\")\\n"},"finish_reason":null}]}',
    '{"id":"z3","object":"chat.completion.chunk","model":"gpt-4o","choices":[{"index":0,"delta":{"content":"```\\n"},"finish_reason":null}]}',
    '{"id":"w1","object":"chat.completion.chunk","model":"gpt-4o","choices":[{"index":0,"delta":{},"finish_reason":"stop"}]}',
    '{"id":"w2","object":"chat.completion.chunk","model":"gpt-4o","choices":[{"index":0,"delta":{"content":"ignored"},"finish_reason":null}]}',
]


def test_golden_iter_text(monkeypatch):
    client = StreamingClient()
    monkeypatch.setattr(client, "iter_sse_lines", _make_iter_lines(FRAMES))

    fragments = list(client.iter_text("http://example.test/v1/chat/completions", {"messages": []}, mapper=map_events))

    assert fragments == ["Intro\n", "```py a.py\n", 'print("hi")\n', "```\n"]
    assert client.model_name == "gpt-4o"


def test_golden_send_message(monkeypatch):
    client = StreamingClient()
    monkeypatch.setattr(client, "iter_sse_lines", _make_iter_lines(FRAMES))

    result = client.send_message("http://example.test", {"messages": []}, mapper=map_events)

    assert result.error is None
    assert result.aborted is False
    assert result.model_name == "gpt-4o"
    assert result.text == 'Intro\n```py a.py\nprint("hi")\n```\n'


def test_network_error_is_upstream_error(monkeypatch):
    client = StreamingClient()
    frames = FRAMES[:2] + [requests.ConnectionError("reset by peer")]
    monkeypatch.setattr(client, "iter_sse_lines", _make_iter_lines(frames))

    received = []
    with pytest.raises(UpstreamError, match="Network error: reset by peer"):
        for fragment in client.iter_text("http://example.test", {}, mapper=map_events):
            received.append(fragment)
    assert received == ["Intro\n", "```py a.py\n"]


def test_timeout_is_reported(monkeypatch):
    client = StreamingClient()
    monkeypatch.setattr(client, "iter_sse_lines", _make_iter_lines([requests.exceptions.ReadTimeout("slow")]))

    result = client.send_message("http://example.test", {}, mapper=map_events)

    assert result.text == ""
    assert result.error == "Request timed out: slow"


def test_abort_stops_stream(monkeypatch):
    client = StreamingClient()
    monkeypatch.setattr(client, "iter_sse_lines", _make_iter_lines(FRAMES))

    gen = client.iter_text("http://example.test", {}, mapper=map_events)
    assert next(gen) == "Intro\n"
    client.abort()
    assert list(gen) == []


def test_close_releases_sse_lines(monkeypatch):
    closed = []

    def _iter_lines(url, json=None, headers=None):
        try:
            yield from FRAMES
        finally:
            closed.append(True)

    client = StreamingClient()
    monkeypatch.setattr(client, "iter_sse_lines", _iter_lines)

    gen = client.iter_text("http://example.test", {}, mapper=map_events)
    next(gen)
    gen.close()
    assert closed == [True]
