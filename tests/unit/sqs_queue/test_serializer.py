"""
Module: test_serializer.py
Description: Unit tests for payload serializers.
"""

from datetime import datetime, timezone

import pytest

from lease_queue.exceptions import SerializationError
from lease_queue.sqs_queue.serializer import (
    JsonSerializer,
    PickleSerializer,
    create_serializer,
)


class TestJsonSerializer:
    """Test cases for JsonSerializer."""

    @pytest.fixture
    def serializer(self):
        return JsonSerializer()

    def test_composite_roundtrip(self, serializer):
        payload = {
            "id": 42,
            "tags": ["a", "b"],
            "nested": {"ok": True, "ratio": 0.5, "missing": None, "items": [{"n": 1}]},
            "text": "café",
        }

        assert serializer.decode(serializer.encode(payload)) == payload

    def test_encode_returns_string(self, serializer):
        assert isinstance(serializer.encode({"id": 1}), str)

    @pytest.mark.parametrize("payload", [
        {1: "a"},
        {"point": (1, 2)},
        [{"nested": {None: True}}],
        {"labels": {"x", "y"}},
    ])
    def test_rejects_values_json_would_change(self, serializer, payload):
        with pytest.raises(SerializationError, match="not JSON serializable"):
            serializer.encode(payload)

    def test_rejects_nan(self, serializer):
        with pytest.raises(SerializationError):
            serializer.encode({"ratio": float("nan")})

    def test_unserializable_payload(self, serializer):
        with pytest.raises(SerializationError, match="not JSON serializable"):
            serializer.encode({"at": datetime.now(timezone.utc)})

    def test_invalid_body(self, serializer):
        with pytest.raises(SerializationError, match="not valid JSON"):
            serializer.decode("{not json")


class TestPickleSerializer:
    """Test cases for PickleSerializer."""

    @pytest.fixture
    def serializer(self):
        return PickleSerializer()

    def test_python_types_roundtrip(self, serializer):
        payload = {
            "point": (1, 2),
            "labels": {"x", "y"},
            "at": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
        }

        decoded = serializer.decode(serializer.encode(payload))

        assert decoded == payload
        assert isinstance(decoded["point"], tuple)

    def test_body_is_ascii(self, serializer):
        serializer.encode({"text": "café"}).encode("ascii")

    def test_unpicklable_payload(self, serializer):
        with pytest.raises(SerializationError, match="not picklable"):
            serializer.encode(lambda: None)

    def test_invalid_body(self, serializer):
        with pytest.raises(SerializationError, match="not a pickled payload"):
            serializer.decode("%%% not base64 %%%")


class TestCreateSerializer:
    """Test cases for serializer selection."""

    def test_known_names(self):
        assert isinstance(create_serializer("json"), JsonSerializer)
        assert isinstance(create_serializer("pickle"), PickleSerializer)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown serializer"):
            create_serializer("xml")
