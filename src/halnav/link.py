from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError
from uritemplate import URITemplate

from .errors import HalParseError
from .properties import PropertyAccessors, PropertyBag


def _template_values(args: tuple, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize expand() arguments into a variable dict.
    Accepted forms:
      expand({"s": 300, "d": 404})
      expand([("s", 300), ("d", 404)])
      expand("s", 300, "d", 404)
      expand(s=300, d=404)
    """
    values: Dict[str, Any] = {}
    if len(args) == 1:
        (first,) = args
        if isinstance(first, Mapping):
            values.update(first)
        else:
            values.update(dict(first))
    elif args:
        if len(args) % 2:
            raise ValueError("Template values must be given as name/value pairs.")
        values.update(zip(args[::2], args[1::2]))
    values.update(kwargs)
    return values


class LinkRecord(PropertyAccessors, BaseModel):
    """
    One entry of a HAL `_links` object.

    Keys outside the fixed HAL link attributes (e.g. width/height on image
    links) are kept as extra properties and exposed through the typed
    accessors. Two links are equal when href and templated are equal; a link
    without href only equals itself.
    """

    href: Optional[str] = None
    hreflang: Optional[str] = None
    name: Optional[str] = None
    profile: Optional[str] = None
    templated: bool = False
    title: Optional[str] = None
    type: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @classmethod
    def from_json(cls, relation: str, value: Any) -> "LinkRecord":
        if not isinstance(value, dict):
            raise HalParseError(
                f"_links value for {relation!r} is a {type(value).__name__} "
                f"and must be an object"
            )
        try:
            return cls.model_validate(value)
        except ValidationError as exc:
            raise HalParseError(f"Invalid link {relation!r}: {exc}") from exc

    @property
    def properties(self) -> PropertyBag:
        return PropertyBag(self.model_extra)

    def expand(self, *args: Any, **kwargs: Any) -> Optional[str]:
        """
        Expand href as an RFC 6570 URI Template.
        Non-templated links return href unchanged and ignore any values.
        Variables without a value are dropped, e.g. '/orders{?id}' -> '/orders'.
        """
        if not self.templated or self.href is None:
            return self.href
        return URITemplate(self.href).expand(_template_values(args, kwargs))

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, LinkRecord):
            return NotImplemented
        if self.href is None:
            return False
        return self.href == other.href and self.templated == other.templated

    def __hash__(self) -> int:
        return hash((self.href, self.templated))


__all__ = ["LinkRecord"]
