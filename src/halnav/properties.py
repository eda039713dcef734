from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Union

# Decoded JSON value: numbers are always floats, objects are plain dicts.
JsonValue = Union[None, bool, float, str, Dict[str, Any], List[Any]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class PropertyBag(Mapping):
    """
    Read-only name -> decoded JSON value mapping with typed accessors.

    Accessors never raise for a missing or mistyped value; they return a
    sentinel instead:
      - numeric accessors: -1
      - get_boolean: False
      - get_string / get_map: None
    A present property can hold a sentinel-equal value, so use
    has_property() when presence matters.
    """

    def __init__(self, values: Optional[Dict[str, JsonValue]] = None):
        # Wraps the owner's dict without copying it.
        self._values: Dict[str, JsonValue] = values if values is not None else {}

    def __getitem__(self, name: str) -> JsonValue:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PropertyBag({self._values!r})"

    def has_property(self, name: str) -> bool:
        return name in self._values

    def get_int(self, name: str) -> int:
        value = self._values.get(name)
        return int(value) if _is_number(value) else -1

    # Python ints are unbounded; kept for parity with get_int.
    get_long = get_int

    def get_double(self, name: str) -> float:
        value = self._values.get(name)
        return float(value) if _is_number(value) else -1.0

    def get_boolean(self, name: str) -> bool:
        value = self._values.get(name)
        return value if isinstance(value, bool) else False

    def get_string(self, name: str) -> Optional[str]:
        value = self._values.get(name)
        return value if isinstance(value, str) else None

    def get_map(self, name: str) -> Optional[Dict[str, Any]]:
        value = self._values.get(name)
        return value if isinstance(value, dict) else None


class PropertyAccessors:
    """Mixin exposing PropertyBag lookups on an object with `properties`."""

    @property
    def properties(self) -> PropertyBag:  # pragma: no cover - abstract
        raise NotImplementedError

    def has_property(self, name: str) -> bool:
        return self.properties.has_property(name)

    def get_int(self, name: str) -> int:
        return self.properties.get_int(name)

    def get_long(self, name: str) -> int:
        return self.properties.get_long(name)

    def get_double(self, name: str) -> float:
        return self.properties.get_double(name)

    def get_boolean(self, name: str) -> bool:
        return self.properties.get_boolean(name)

    def get_string(self, name: str) -> Optional[str]:
        return self.properties.get_string(name)

    def get_map(self, name: str) -> Optional[Dict[str, Any]]:
        return self.properties.get_map(name)


__all__ = ["JsonValue", "PropertyBag", "PropertyAccessors"]
