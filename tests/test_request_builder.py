#!/usr/bin/env python3
"""
Unit tests for archive decisions and save request building.
"""

import uuid

import pytest
from models import Tag, ValidatedRecord
from request_builder import build_save_request, format_time_added, should_archive


class TestShouldArchive:
    """Archive decision truth table."""

    @pytest.mark.parametrize(
        "status,has_tags,unread_untagged,expected",
        [
            ("unread", True, False, False),
            ("unread", False, False, False),
            ("unread", True, True, False),
            ("unread", False, True, False),
            ("", True, False, False),
            ("archive", True, False, True),
            ("archive", False, False, True),
            ("archive", True, True, True),
            ("archive", False, True, False),
        ],
    )
    def test_truth_table(self, status, has_tags, unread_untagged, expected):
        assert should_archive(status, has_tags, unread_untagged) is expected

    def test_default_mode_mirrors_pocket(self):
        assert should_archive("archive", False) is True


class TestFormatTimeAdded:
    def test_unix_timestamp(self):
        assert format_time_added("1609459200") == "2021-01-01T00:00:00.000Z"

    def test_epoch(self):
        assert format_time_added("0") == "1970-01-01T00:00:00.000Z"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1609459200.5", "2021-01-01T00:00:00.000Z"),
            ("1609459200abc", "2021-01-01T00:00:00.000Z"),
            ("+1609459200", "2021-01-01T00:00:00.000Z"),
            ("12.5", "1970-01-01T00:00:12.000Z"),
            ("1e9", "1970-01-01T00:00:01.000Z"),
        ],
    )
    def test_leading_integer_used(self, value, expected):
        assert format_time_added(value) == expected

    def test_year_before_1000_zero_padded(self):
        assert format_time_added("-61000000000") == "0036-12-26T11:33:20.000Z"

    @pytest.mark.parametrize("value", ["", "not-a-number", "abc123", "-", ".5"])
    def test_non_numeric(self, value):
        assert format_time_added(value) is None

    def test_out_of_range(self):
        assert format_time_added("9" * 30) is None


class TestBuildSaveRequest:
    def setup_method(self):
        self.record = ValidatedRecord(
            title="Test Article",
            url="https://example.com/article",
            time_added="1609459200",
            tags="tech|news",
            status="archive",
        )
        self.tags = [Tag(name="tech"), Tag(name="news")]

    def test_full_request(self):
        request = build_save_request(self.record, self.tags, archive=True)

        assert request.url == "https://example.com/article"
        assert request.source == "api"
        assert request.timezone == "UTC"
        assert request.locale == "en-US"
        assert request.labels == self.tags
        assert request.state == "ARCHIVED"
        assert request.saved_at == "2021-01-01T00:00:00.000Z"
        assert request.published_at == "2021-01-01T00:00:00.000Z"
        assert uuid.UUID(request.client_request_id).version == 4

    def test_minimal_request(self):
        record = ValidatedRecord(title="", url="https://example.com")

        request = build_save_request(record, [], archive=False)

        assert request.labels is None
        assert request.state is None
        assert request.saved_at is None
        assert request.published_at is None
        assert request.to_payload() == {
            "url": "https://example.com",
            "clientRequestId": request.client_request_id,
            "source": "api",
            "timezone": "UTC",
            "locale": "en-US",
        }

    def test_fresh_request_id_each_time(self):
        first = build_save_request(self.record, self.tags, archive=False)
        second = build_save_request(self.record, self.tags, archive=False)

        assert first.client_request_id != second.client_request_id

    def test_not_archived_omits_state(self):
        request = build_save_request(self.record, self.tags, archive=False)

        assert request.state is None
        assert "state" not in request.to_payload()

    def test_invalid_time_added_omits_timestamps(self):
        self.record.time_added = "yesterday"

        payload = build_save_request(self.record, self.tags, archive=True).to_payload()

        assert "savedAt" not in payload
        assert "publishedAt" not in payload

    def test_payload_labels(self):
        payload = build_save_request(self.record, self.tags, archive=True).to_payload()

        assert payload["labels"] == [
            {"name": "tech", "color": "#EF8C43", "description": ""},
            {"name": "news", "color": "#EF8C43", "description": ""},
        ]
        assert payload["state"] == "ARCHIVED"
        assert payload["savedAt"] == "2021-01-01T00:00:00.000Z"
        assert payload["publishedAt"] == "2021-01-01T00:00:00.000Z"
