"""
Module: serializer.py
Description: Payload serializers for queue message bodies.

A serializer turns caller payloads into the message body string sent
to the queue and back. JSON is the default; pickle is available for
trusted producers that need Python-specific types to survive the trip.
"""

import base64
import json
import pickle
from abc import ABC, abstractmethod
from typing import Any

from ..exceptions import SerializationError


class Serializer(ABC):
    """Encode payloads to message bodies and decode them back."""

    name: str = ""

    @abstractmethod
    def encode(self, value: Any) -> str:
        """Encode a payload into a message body."""

    @abstractmethod
    def decode(self, body: str) -> Any:
        """Decode a message body into a payload."""


class JsonSerializer(Serializer):
    """
    JSON message bodies.

    Round-trips dicts with string keys, lists, strings, finite numbers,
    booleans and None. Anything JSON would silently change on the way
    back (tuples, non-string keys, NaN) is rejected at encode time.
    """

    name = "json"

    def encode(self, value: Any) -> str:
        try:
            _check_json_value(value, "payload")
            return json.dumps(
                value,
                ensure_ascii=False,
                allow_nan=False,
                separators=(',', ':')
            )
        except (TypeError, ValueError, RecursionError) as e:
            raise SerializationError(f"Payload is not JSON serializable: {e}") from e

    def decode(self, body: str) -> Any:
        try:
            return json.loads(body)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Message body is not valid JSON: {e}") from e


def _check_json_value(value: Any, path: str) -> None:
    """Raise TypeError if value would not decode back equal to itself."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return
    if isinstance(value, list):
        for index, element in enumerate(value):
            _check_json_value(element, f"{path}[{index}]")
        return
    if isinstance(value, dict):
        for key, element in value.items():
            if not isinstance(key, str):
                raise TypeError(
                    f"{path} has key {key!r} of type {type(key).__name__}, "
                    "JSON object keys must be strings"
                )
            _check_json_value(element, f"{path}[{key!r}]")
        return
    raise TypeError(
        f"{path} is a {type(value).__name__}, which does not survive a JSON round trip"
    )


class PickleSerializer(Serializer):
    """
    Base64-encoded pickle message bodies.

    Preserves any picklable value (tuples, sets, datetimes, models).
    Decoding runs pickle on the body, so only use it on queues that
    trusted producers write to.
    """

    name = "pickle"

    def encode(self, value: Any) -> str:
        try:
            raw = pickle.dumps(value, protocol=pickle.HIGHEST_PROTOCOL)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise SerializationError(f"Payload is not picklable: {e}") from e
        return base64.b64encode(raw).decode('ascii')

    def decode(self, body: str) -> Any:
        try:
            raw = base64.b64decode(body.encode('ascii'), validate=True)
            return pickle.loads(raw)
        except Exception as e:
            raise SerializationError(f"Message body is not a pickled payload: {e}") from e


_SERIALIZERS = {
    JsonSerializer.name: JsonSerializer,
    PickleSerializer.name: PickleSerializer,
}


def create_serializer(name: str) -> Serializer:
    """
    Build the serializer registered under name.

    Raises:
        ValueError: If no serializer is registered under name
    """
    try:
        return _SERIALIZERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown serializer '{name}', expected one of: {', '.join(sorted(_SERIALIZERS))}"
        ) from None
