"""
Module: test_handle.py
Description: Unit tests for QueueHandle and lease negotiation.
"""

import pytest
from pydantic import ValidationError

from lease_queue.exceptions import QueueNotCreatedError
from lease_queue.models.handle import LeaseTerms, QueueHandle, negotiate_lease


class TestNegotiateLease:
    """Test cases for wait time and visibility negotiation."""

    def test_lease_time_overrides_default(self):
        assert negotiate_lease(5, 60, 1) == LeaseTerms(5, 1)

    def test_default_visibility_when_no_lease(self):
        assert negotiate_lease(0, 60, 10) == LeaseTerms(60, 10)
        assert negotiate_lease(-3, 60, 10) == LeaseTerms(60, 10)

    def test_wait_clamped_to_lease(self):
        """Test a short lease caps the long-poll wait."""
        assert negotiate_lease(5, 60, 10) == LeaseTerms(5, 5)

    def test_zero_wait_disables_long_polling(self):
        assert negotiate_lease(5, 60, 0) == LeaseTerms(5, 0)
        assert negotiate_lease(0, 1, 0) == LeaseTerms(1, 0)

    def test_wait_never_exceeds_visibility(self):
        """Test wait == min(configured wait, visibility) across the valid range."""
        for configured_wait in range(0, 21):
            for visibility in (1, 2, 5, 10, 19, 20, 21, 30, 43200):
                terms = negotiate_lease(visibility, 60, configured_wait)
                assert terms.visibility_timeout == visibility
                assert terms.wait_time_seconds == min(configured_wait, visibility)

    def test_lease_clamped_to_service_maximum(self):
        assert negotiate_lease(100000, 60, 20) == LeaseTerms(43200, 20)


class TestQueueHandle:
    """Test cases for QueueHandle binding."""

    @pytest.fixture
    def handle(self):
        return QueueHandle(name="jobs", visibility_timeout=30, wait_time_seconds=10)

    def test_unbound_by_default(self, handle):
        assert handle.queue_url is None
        assert not handle.is_bound

        with pytest.raises(QueueNotCreatedError, match="jobs"):
            handle.require_url()

    def test_bind(self, handle):
        handle.bind("memory://local/jobs")

        assert handle.is_bound
        assert handle.require_url() == "memory://local/jobs"

    def test_bind_same_url_twice(self, handle):
        handle.bind("memory://local/jobs")
        handle.bind("memory://local/jobs")

        assert handle.queue_url == "memory://local/jobs"

    def test_bind_different_url(self, handle):
        handle.bind("memory://local/jobs")

        with pytest.raises(RuntimeError, match="already bound"):
            handle.bind("memory://local/other")

    def test_bind_empty_url(self, handle):
        with pytest.raises(ValueError):
            handle.bind("")

    def test_unbind(self, handle):
        handle.bind("memory://local/jobs")
        handle.unbind()

        assert not handle.is_bound

    def test_lease_terms_use_handle_defaults(self, handle):
        assert handle.lease_terms() == LeaseTerms(30, 10)
        assert handle.lease_terms(4) == LeaseTerms(4, 4)

    def test_invalid_defaults(self):
        with pytest.raises(ValidationError):
            QueueHandle(name="jobs", visibility_timeout=0, wait_time_seconds=0)

        with pytest.raises(ValidationError):
            QueueHandle(name="jobs", visibility_timeout=30, wait_time_seconds=21)
