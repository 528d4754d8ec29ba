#!/usr/bin/env python3
"""Tests for the GitHub advisory fetcher."""

import sys
from pathlib import Path
from unittest import mock

import pytest
import requests

sys.path.insert(0, str(Path(__file__).parent))

from advisory_watch.errors import FetchError, ParseError, TransportError
from advisory_watch.fetchers.github import advisories_url, fetch_advisories


def fake_response(status_code=200, payload=None, text=None):
    response = mock.Mock()
    response.status_code = status_code
    response.text = text if text is not None else ""
    if payload is not None:
        response.json.return_value = payload
    else:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    return response


def test_fetch_parses_advisories_in_order():
    payload = [
        {
            "ghsa_id": "GHSA-aaaa",
            "summary": "First",
            "html_url": "https://example.com/a",
            "published_at": "2024-01-01T00:00:00Z",
            "severity": "high",
            "state": "published",
        },
        {"ghsa_id": "GHSA-bbbb", "summary": "Second", "severity": None},
    ]

    with mock.patch("requests.get", return_value=fake_response(payload=payload)) as get:
        advisories = fetch_advisories("angular/angular", timeout=5)

    assert [adv.ghsa_id for adv in advisories] == ["GHSA-aaaa", "GHSA-bbbb"]
    assert advisories[0].severity == "high"
    assert advisories[1].html_url is None
    assert advisories[1].published_at is None

    args, kwargs = get.call_args
    assert args[0] == "https://api.github.com/repos/angular/angular/security-advisories"
    assert kwargs["headers"]["Accept"] == "application/vnd.github+json"
    assert kwargs["headers"]["X-GitHub-Api-Version"] == "2022-11-28"
    assert kwargs["headers"]["User-Agent"] == "Angular-Security-Monitor"
    assert kwargs["timeout"] == 5


def test_non_200_raises_fetch_error():
    response = fake_response(status_code=403, payload={}, text='{"message": "rate limited"}')

    with mock.patch("requests.get", return_value=response):
        with pytest.raises(FetchError) as excinfo:
            fetch_advisories()

    assert excinfo.value.status_code == 403
    assert "rate limited" in excinfo.value.body


def test_invalid_json_raises_parse_error():
    with mock.patch("requests.get", return_value=fake_response(text="<html>")):
        with pytest.raises(ParseError):
            fetch_advisories()


def test_non_array_body_raises_parse_error():
    with mock.patch("requests.get", return_value=fake_response(payload={"message": "hi"})):
        with pytest.raises(ParseError):
            fetch_advisories()


def test_connection_failure_raises_transport_error():
    error = requests.exceptions.ConnectionError("Name or service not known")

    with mock.patch("requests.get", side_effect=error):
        with pytest.raises(TransportError):
            fetch_advisories()


def test_advisories_url_strips_slashes():
    assert advisories_url("/owner/repo/") == (
        "https://api.github.com/repos/owner/repo/security-advisories"
    )


def test_entries_without_string_id_are_skipped(caplog):
    payload = [
        {"summary": "No id at all"},
        {"ghsa_id": ["GHSA-list"], "summary": "List id"},
        "not-an-object",
        {"ghsa_id": "GHSA-good", "summary": "Kept"},
    ]

    with mock.patch("requests.get", return_value=fake_response(payload=payload)):
        advisories = fetch_advisories()

    assert [adv.ghsa_id for adv in advisories] == ["GHSA-good"]
    assert "Skipping advisory entry" in caplog.text
