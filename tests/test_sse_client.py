#!/usr/bin/env python3
"""
Tests for SSE line iteration over requests.
"""

import sys
import os
from unittest.mock import Mock, patch

import pytest
import requests

# Add parent directory to path to import our modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from util.sse_client import iter_sse_lines


def _session(lines, method="post"):
    mock_response = Mock()
    mock_response.iter_lines.return_value = lines
    mock_response.raise_for_status.return_value = None

    mock_session = Mock()
    req = getattr(mock_session, method)
    req.return_value.__enter__ = Mock(return_value=mock_response)
    req.return_value.__exit__ = Mock(return_value=None)
    return mock_session


def test_sse_lines_data_prefix_stripping():
    """The 'data:' prefix is stripped, other lines pass through."""
    session = _session([
        "data: Content with spaces",
        "data:No space after colon",
        "event: some-event",
        "data: [DONE]",
    ])
    lines = list(iter_sse_lines("http://test.com", session=session))
    assert lines == ["Content with spaces", "No space after colon", "event: some-event", "[DONE]"]


def test_sse_lines_skip_keepalives_and_comments():
    session = _session(["data: a", "", None, ": OPENROUTER PROCESSING", "data: b"])
    assert list(iter_sse_lines("http://test.com", session=session)) == ["a", "b"]


def test_sse_lines_request_arguments():
    """Payload, headers and timeout are forwarded to the session."""
    session = _session(["data: x"])
    headers = {"Authorization": "Bearer k"}
    list(iter_sse_lines("http://test.com", json={"m": 1}, headers=headers, timeout=5.0, session=session))
    session.post.assert_called_once_with(
        "http://test.com",
        json={"m": 1},
        params=None,
        headers=headers,
        stream=True,
        timeout=5.0,
    )


def test_sse_lines_get_method():
    session = _session(["data: GET response"], method="get")
    assert list(iter_sse_lines("http://test.com", method="GET", session=session)) == ["GET response"]
    session.get.assert_called_once()


@patch('util.sse_client.requests.Session')
def test_sse_lines_default_session(mock_session_class):
    """A session is created when none is provided."""
    mock_session_class.return_value = _session(["data: Default session"])
    lines = list(iter_sse_lines("http://test.com", json={"test": True}))
    mock_session_class.assert_called_once()
    assert lines == ["Default session"]


def test_sse_lines_http_error():
    session = _session([])
    response = session.post.return_value.__enter__.return_value
    response.raise_for_status.side_effect = requests.HTTPError("HTTP 500 Error")
    with pytest.raises(requests.HTTPError, match="HTTP 500 Error"):
        list(iter_sse_lines("http://test.com", session=session))
