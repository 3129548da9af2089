"""
Module: test_item.py
Description: Unit tests for item models.
"""

import pytest
from pydantic import ValidationError

from lease_queue.models.item import ClaimedItem, RawPayload, ReceivedMessage


class TestClaimedItem:
    """Test cases for ClaimedItem."""

    def test_has_handle(self):
        assert ClaimedItem(data={"id": 1}, handle="abc").has_handle()
        assert not ClaimedItem(data={"id": 1}).has_handle()
        assert not ClaimedItem(data={"id": 1}, handle="").has_handle()
        assert not ClaimedItem(data={"id": 1}, handle="   ").has_handle()

    def test_defaults(self):
        item = ClaimedItem(data=[1, 2, 3], handle="abc")

        assert item.receive_count == 1
        assert item.lease_seconds == 0
        assert item.claimed_at.tzinfo is not None

    def test_is_frozen(self):
        item = ClaimedItem(data="x", handle="abc")

        with pytest.raises(ValidationError):
            item.handle = "other"

    def test_receive_count_positive(self):
        with pytest.raises(ValidationError):
            ClaimedItem(data="x", handle="abc", receive_count=0)


class TestRawPayload:
    """Test cases for RawPayload."""

    def test_wraps_any_value(self):
        assert RawPayload(value={"data": 1, "handle": "h"}).value == {"data": 1, "handle": "h"}
        assert RawPayload(value=None).value is None


class TestReceivedMessage:
    """Test cases for ReceivedMessage."""

    def test_optional_fields(self):
        message = ReceivedMessage(body="{}")

        assert message.receipt_handle is None
        assert message.message_id is None
        assert message.receive_count == 1
