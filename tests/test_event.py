"""Tests for reading the triggering event payload."""
from __future__ import annotations

import json

import pytest

from ghcherry.errors import TriggerError
from ghcherry.event import load_event, parse_event

from .conftest import event_payload


class TestLoadEvent:
    def test_reads_json_object(self, tmp_path):
        path = tmp_path / "event.json"
        path.write_text(json.dumps(event_payload()), encoding="utf-8")
        assert load_event(path)["repository"]["full_name"] == "owner/repo"

    def test_missing_file_raises_trigger_error(self, tmp_path):
        with pytest.raises(TriggerError, match="not found"):
            load_event(tmp_path / "missing.json")

    def test_invalid_json_raises_trigger_error(self, tmp_path):
        path = tmp_path / "event.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(TriggerError, match="not valid JSON"):
            load_event(path)

    def test_non_object_raises_trigger_error(self, tmp_path):
        path = tmp_path / "event.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(TriggerError):
            load_event(path)


class TestParseEvent:
    def test_issue_comment_fields(self):
        event = parse_event(event_payload())
        assert event.repo_full_name == "owner/repo"
        assert event.pr_number == 7
        assert event.comment_body == "/cherry-pick release-2.1"
        assert event.comment_author == "alice"
        assert event.title == "Fix bug"
        assert event.body == "Fixes the bug."

    def test_override_wins_over_payload(self):
        assert parse_event(event_payload(number=7), pr_number=99).pr_number == 99

    def test_pull_request_number_preferred_over_issue(self):
        payload = event_payload(number=7)
        payload["pull_request"] = {"number": 11, "user": {"login": "bob"}}
        assert parse_event(payload).pr_number == 11

    def test_non_numeric_number_raises(self):
        with pytest.raises(TriggerError, match="not a number"):
            parse_event(event_payload(number="abc"))

    def test_missing_number_raises(self):
        with pytest.raises(TriggerError, match="Failed to determine PR Number"):
            parse_event(event_payload(number=None))

    def test_author_falls_back_to_pull_request_user(self):
        payload = event_payload(login=None)
        payload["pull_request"] = {"number": 7, "user": {"login": "bob"}}
        assert parse_event(payload).comment_author == "bob"

    def test_missing_author_raises(self):
        with pytest.raises(TriggerError):
            parse_event(event_payload(login=None))

    def test_null_body_becomes_empty_string(self):
        assert parse_event(event_payload(body=None)).body == ""

    def test_missing_repository_raises(self):
        payload = event_payload()
        del payload["repository"]
        with pytest.raises(TriggerError):
            parse_event(payload)
