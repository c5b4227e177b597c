"""Tests for log redaction."""

from storefront.logging import REDACTED, redact_sensitive


class TestRedactSensitive:
    def test_top_level_keys(self):
        event = redact_sensitive(None, "info", {"event": "login", "password": "hunter2", "token": "abc"})

        assert event == {"event": "login", "password": REDACTED, "token": REDACTED}

    def test_case_insensitive(self):
        event = redact_sensitive(None, "info", {"Authorization": "Basic xyz", "Cookie": "session=abc"})

        assert event["Authorization"] == REDACTED
        assert event["Cookie"] == REDACTED

    def test_nested_values(self):
        event = redact_sensitive(
            None,
            "info",
            {"event": "request", "body": {"email": "a@b.co", "password": "pw"}, "items": [{"cvv": "123"}]},
        )

        assert event["body"] == {"email": "a@b.co", "password": REDACTED}
        assert event["items"] == [{"cvv": REDACTED}]

    def test_other_fields_untouched(self):
        event = redact_sensitive(None, "warning", {"event": "session_rejected", "reason": "expired"})

        assert event == {"event": "session_rejected", "reason": "expired"}
