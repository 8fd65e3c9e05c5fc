"""Tests for allowlist parsing and schema validation."""

from __future__ import annotations

import json

import pytest

from auditgate.engines.audit_filter.allowlist import parse_allowlist
from auditgate.engines.audit_filter.errors import (
    AllowlistSchemaError,
    AllowlistStructureError,
    JsonSyntaxError,
)
from auditgate.engines.audit_filter.models import AllowlistEntry


def _entry(**overrides) -> dict:
    defaults = {
        "id": "1234",
        "package": "minimist",
        "reason": "Dev-only dependency, not shipped",
        "expires": "2026-06-30T00:00:00Z",
    }
    defaults.update(overrides)
    return defaults


def _violations(entries: list) -> list[tuple[int, str | None, str]]:
    with pytest.raises(AllowlistSchemaError) as exc_info:
        parse_allowlist(json.dumps(entries))
    return [(v.index, v.field, v.rule) for v in exc_info.value.violations]


class TestParseAllowlist:
    def test_none_is_empty(self):
        assert parse_allowlist(None) == []

    def test_empty_array(self):
        assert parse_allowlist("[]") == []

    def test_valid_entry(self):
        entries = parse_allowlist(json.dumps([_entry(notes="tracked in JIRA-1", reviewedOn="2026-01-01")]))
        assert entries == [
            AllowlistEntry(
                id="1234",
                package="minimist",
                reason="Dev-only dependency, not shipped",
                expires="2026-06-30T00:00:00Z",
                notes="tracked in JIRA-1",
                reviewed_on="2026-01-01",
            )
        ]

    def test_expires_kept_verbatim(self):
        entries = parse_allowlist(json.dumps([_entry(expires="2026-06-30")]))
        assert entries[0].expires == "2026-06-30"

    def test_optional_fields_nullable(self):
        entries = parse_allowlist(json.dumps([_entry(notes=None, reviewedOn=None)]))
        assert entries[0].notes is None
        assert entries[0].reviewed_on is None

    def test_invalid_json(self):
        with pytest.raises(JsonSyntaxError) as exc_info:
            parse_allowlist('[{"id": "1", "package": "x"')
        assert exc_info.value.source == "allowlist file"
        assert "Mismatched brackets or braces" in str(exc_info.value)

    @pytest.mark.parametrize("payload", ['{"id": "1"}', '"x"', "null", "3"])
    def test_non_array_top_level(self, payload):
        with pytest.raises(AllowlistStructureError, match="must be an array"):
            parse_allowlist(payload)


class TestAllowlistSchema:
    def test_missing_field(self):
        entry = _entry()
        del entry["reason"]
        assert _violations([entry]) == [(0, "reason", "missing")]

    def test_empty_field(self):
        assert _violations([_entry(package="")]) == [(0, "package", "empty")]

    def test_empty_expires(self):
        assert _violations([_entry(expires="")]) == [(0, "expires", "empty")]

    def test_wrong_type(self):
        assert _violations([_entry(id=1234)]) == [(0, "id", "wrong_type")]

    def test_unknown_property(self):
        assert _violations([_entry(severity="high")]) == [(0, "severity", "unknown_property")]

    def test_snake_case_reviewed_on_rejected(self):
        assert _violations([_entry(reviewed_on="2026-01-01")]) == [(0, "reviewed_on", "unknown_property")]

    def test_unparsable_expires(self):
        assert _violations([_entry(expires="next quarter")]) == [(0, "expires", "invalid_date")]

    def test_out_of_range_expires(self):
        found = _violations([_entry(expires="9999-12-31T23:59:59-01:00")])
        assert found == [(0, "expires", "invalid_date")]

    def test_unparsable_reviewed_on(self):
        assert _violations([_entry(reviewedOn="last week")]) == [(0, "reviewedOn", "invalid_date")]

    def test_entry_not_object(self):
        assert _violations([_entry(), "1234"]) == [(1, None, "not_an_object")]

    def test_all_violations_aggregated(self):
        bad_first = _entry(id="")
        bad_second = _entry(expires="never", extra="x")
        del bad_second["package"]
        found = _violations([bad_first, _entry(), bad_second])

        assert (0, "id", "empty") in found
        assert (2, "package", "missing") in found
        assert (2, "expires", "invalid_date") in found
        assert (2, "extra", "unknown_property") in found
        assert len(found) == 4

    def test_message_lists_every_violation(self):
        with pytest.raises(AllowlistSchemaError) as exc_info:
            parse_allowlist(json.dumps([_entry(reason=""), _entry(id=None)]))
        msg = str(exc_info.value)
        assert "2 error(s)" in msg
        assert "Entry at index 0: field 'reason' cannot be empty" in msg
        assert "Entry at index 1: field 'id' must be a string" in msg
