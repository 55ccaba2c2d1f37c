"""Unit tests for structured logging helpers."""

import json
import logging

import pytest

from myskin.core.logging_config import REDACTED, JSONFormatter, RedactingFilter, redact


def _record(context):
    record = logging.LogRecord("myskin.test", logging.INFO, __file__, 1, "Saved", None, None)
    record.context = context
    return record


@pytest.mark.security
class TestRedaction:
    def test_masks_sensitive_keys_at_any_depth(self):
        context = {
            "email": "ada@example.com",
            "Password": "hunter2",
            "bank": {"account_number": "0123456789", "bank_name": "GTBank"},
            "attempts": [{"token": "abc"}],
        }

        result = redact(context)

        assert result["email"] == "ada@example.com"
        assert result["Password"] == REDACTED
        assert result["bank"] == {"account_number": REDACTED, "bank_name": "GTBank"}
        assert result["attempts"] == [{"token": REDACTED}]
        # Input is left untouched
        assert context["Password"] == "hunter2"

    def test_filter_rewrites_context_before_formatting(self):
        record = _record({"order_id": "abc", "secret": "sk_live"})

        assert RedactingFilter().filter(record) is True
        payload = json.loads(JSONFormatter().format(record))

        assert payload["context"] == {"order_id": "abc", "secret": REDACTED}
        assert payload["message"] == "Saved"

    def test_filter_ignores_records_without_context(self):
        record = logging.LogRecord("myskin.test", logging.INFO, __file__, 1, "plain", None, None)
        assert RedactingFilter().filter(record) is True
        assert not hasattr(record, "context")
