"""Driver placeholder conventions.

A :class:`Placeholder` pairs a :class:`PlaceholderStyle` with the marker
character the driver expects:

- SIMPLE: every parameter is the bare marker (``?``)
- NUMBERED: marker plus the 1-based occurrence number (``$1``, ``$2``)
- NAMED: marker plus the parameter name (``:name``, ``@name``)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Final

from sqlbind.exceptions import ImproperConfigurationError

__all__ = ("BIND_MARKER", "Placeholder", "PlaceholderStyle", "translate")

BIND_MARKER: Final = ":"
"""Marker that introduces a bind variable in configured SQL."""


class PlaceholderStyle(str, Enum):
    """Placeholder style enumeration."""

    SIMPLE = "simple"
    NUMBERED = "numbered"
    NAMED = "named"


@dataclass(frozen=True)
class Placeholder:
    """Placeholder style together with its marker character."""

    style: PlaceholderStyle
    marker: str

    def __post_init__(self) -> None:
        if len(self.marker) != 1:
            msg = f"Placeholder marker must be a single character, got {self.marker!r}"
            raise ImproperConfigurationError(msg)

    @classmethod
    def simple(cls, marker: str = "?") -> "Placeholder":
        return cls(PlaceholderStyle.SIMPLE, marker)

    @classmethod
    def numbered(cls, marker: str = "$") -> "Placeholder":
        return cls(PlaceholderStyle.NUMBERED, marker)

    @classmethod
    def named(cls, marker: str = BIND_MARKER) -> "Placeholder":
        return cls(PlaceholderStyle.NAMED, marker)

    @property
    def passthrough(self) -> bool:
        """Whether bind variables are written back unchanged."""
        return self.style is not PlaceholderStyle.SIMPLE and self.marker == BIND_MARKER

    @property
    def keeps_names(self) -> bool:
        """Whether the rewritten SQL still refers to parameters by name."""
        return self.style is PlaceholderStyle.NAMED or self.passthrough

    def translate(self, text: str, index: int) -> str:
        """Return the driver text replacing one bind variable.

        Args:
            text: Original token text, bind marker included (``:name``)
            index: Zero-based occurrence of the bind variable in its query

        Returns:
            The placeholder to write in place of ``text``.
        """
        # configured SQL already uses this convention
        if self.passthrough:
            return text
        if self.style is PlaceholderStyle.SIMPLE:
            return self.marker
        if self.style is PlaceholderStyle.NUMBERED:
            return f"{self.marker}{index + 1}"
        return self.marker + text[len(BIND_MARKER) :]

    def __str__(self) -> str:
        return f"{self.style.value}({self.marker})"


def translate(placeholder: Placeholder, text: str, index: int) -> str:
    """Translate one bind variable for ``placeholder``. See :meth:`Placeholder.translate`."""
    return placeholder.translate(text, index)
