"""OID value type.

OIDs are represented as tuples of non-negative integers throughout the
package. ``OidPath`` is a thin ``tuple`` subclass, so ordinary tuple
comparison gives component-wise numeric ordering (``1.9`` sorts before
``1.10``) and a prefix always sorts before its extensions.
"""
from __future__ import annotations

from typing import Iterable, Sequence, Union

OidLike = Union[str, Sequence[int], "OidPath"]


class OidPath(tuple):  # type: ignore[type-arg]
    """Immutable dotted-numeric object identifier."""

    __slots__ = ()

    def __new__(cls, components: Iterable[int] = ()) -> "OidPath":
        values = tuple(int(c) for c in components)
        for value in values:
            if value < 0:
                raise ValueError(f"OID components must be non-negative, got {value}")
        return super().__new__(cls, values)

    @classmethod
    def parse(cls, text: str) -> "OidPath":
        """Parse dotted text into an OidPath.

        Handles various formats:
        - With leading dot: ".1.3.6.1.2.1.1.1.0"
        - Without leading dot: "1.3.6.1.2.1.1.1.0"
        - Empty strings return the empty path

        Raises:
            ValueError: if a component is not a non-negative decimal integer.

        Examples:
            >>> OidPath.parse(".1.3.6.1")
            OidPath('1.3.6.1')
        """
        text = text.strip()
        if text.startswith("."):
            text = text[1:]
        if not text:
            return cls()
        parts = text.split(".")
        for part in parts:
            if not part.isdigit():
                raise ValueError(f"Invalid OID component {part!r} in {text!r}")
        return cls(int(p) for p in parts)

    @classmethod
    def coerce(cls, oid: OidLike) -> "OidPath":
        """Normalize an OID given as text, a sequence of ints or an OidPath.

        Objects exposing ``asTuple()`` (pyasn1 ``ObjectIdentifier`` and pysnmp
        ``ObjectName``) are accepted as well.
        """
        if isinstance(oid, OidPath):
            return oid
        if isinstance(oid, str):
            return cls.parse(oid)
        as_tuple = getattr(oid, "asTuple", None)
        if callable(as_tuple):
            return cls(as_tuple())
        if isinstance(oid, (tuple, list)):
            return cls(oid)
        raise TypeError(f"OID must be string, tuple, or list, got {type(oid)}")

    def child(self, *components: int) -> "OidPath":
        return OidPath(tuple(self) + tuple(components))

    @property
    def parent(self) -> "OidPath":
        return OidPath(self[:-1])

    def is_prefix_of(self, other: Sequence[int]) -> bool:
        return len(self) <= len(other) and tuple(other[: len(self)]) == tuple(self)

    @property
    def dotted(self) -> str:
        return ".".join(str(c) for c in self)

    @property
    def absolute(self) -> str:
        """Dotted form with a leading dot, as net-snmp prints numeric OIDs."""
        return "." + self.dotted

    def __str__(self) -> str:
        return self.dotted

    def __repr__(self) -> str:
        return f"OidPath('{self.dotted}')"
