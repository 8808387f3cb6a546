"""Driver placeholder configuration.

The driver table is fixed and read-only. A :class:`BindingConfig` is built once
per process (usually by the route loader) and handed to whatever compiles
queries; nothing here is a mutable registry.

Environment Variables Supported:
- SQLBIND_STRICT_DRIVER: Reject unknown driver identifiers instead of falling
  back to ``?`` placeholders (true/false)
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from difflib import get_close_matches
from types import MappingProxyType
from typing import Final, Optional

from sqlbind.core.binder import QueryArtifact, compile_query
from sqlbind.core.placeholders import Placeholder
from sqlbind.exceptions import UnknownDriverError
from sqlbind.utils.logging import get_logger

__all__ = (
    "DEFAULT_DRIVER_PLACEHOLDERS",
    "FALLBACK_PLACEHOLDER",
    "BindingConfig",
    "resolve_placeholder",
    "strict_driver_default",
)

logger = get_logger("core.config")

_SQLITE: Final = Placeholder.named(":")
_POSTGRES: Final = Placeholder.numbered("$")
_MYSQL: Final = Placeholder.simple("?")
_SQLSERVER: Final = Placeholder.named("@")

DEFAULT_DRIVER_PLACEHOLDERS: "Final[Mapping[str, Placeholder]]" = MappingProxyType({
    # sqlite family
    "sqlite3": _SQLITE,
    "sqlite": _SQLITE,
    "aiosqlite": _SQLITE,
    # postgres family
    "postgres": _POSTGRES,
    "postgresql": _POSTGRES,
    "pgx": _POSTGRES,
    "ql": _POSTGRES,
    # mysql family
    "mysql": _MYSQL,
    "mariadb": _MYSQL,
    # sql server family
    "sqlserver": _SQLSERVER,
    "mssql": _SQLSERVER,
})

FALLBACK_PLACEHOLDER: Final = Placeholder.simple("?")


def _env_bool(key: str, default: bool) -> bool:
    """Get boolean value from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on", "enabled")


def strict_driver_default() -> bool:
    """Default for ``strict`` when the caller does not choose."""
    return _env_bool("SQLBIND_STRICT_DRIVER", False)


def _normalize_driver(driver: str) -> str:
    return driver.strip().lower()


def resolve_placeholder(
    driver: str, *, strict: Optional[bool] = None, overrides: "Optional[Mapping[str, Placeholder]]" = None
) -> Placeholder:
    """Find the placeholder convention of ``driver``.

    Args:
        driver: Driver identifier (``sqlite3``, ``postgres``, ...)
        strict: Raise on unknown drivers instead of falling back. ``None``
            reads ``SQLBIND_STRICT_DRIVER``.
        overrides: Extra or replacement entries consulted before the default table

    Raises:
        UnknownDriverError: If ``strict`` and the driver is not known.

    Returns:
        The placeholder for ``driver``, or :data:`FALLBACK_PLACEHOLDER`.
    """
    if strict is None:
        strict = strict_driver_default()
    key = _normalize_driver(driver)
    if overrides:
        for name, placeholder in overrides.items():
            if _normalize_driver(name) == key:
                return placeholder
    placeholder = DEFAULT_DRIVER_PLACEHOLDERS.get(key)
    if placeholder is not None:
        return placeholder

    known = set(DEFAULT_DRIVER_PLACEHOLDERS)
    if overrides:
        known.update(_normalize_driver(name) for name in overrides)
    suggestions = get_close_matches(key, sorted(known), n=3, cutoff=0.6)
    if strict:
        raise UnknownDriverError(driver, suggestions)
    logger.warning(
        "Unknown database driver %r, using %s placeholders%s",
        driver,
        FALLBACK_PLACEHOLDER,
        f" (did you mean {', '.join(suggestions)}?)" if suggestions else "",
    )
    return FALLBACK_PLACEHOLDER


@dataclass(frozen=True)
class BindingConfig:
    """Placeholder configuration of one database driver."""

    driver: str
    placeholder: Placeholder
    strict: bool = False

    @classmethod
    def for_driver(
        cls,
        driver: str,
        *,
        strict: Optional[bool] = None,
        overrides: "Optional[Mapping[str, Placeholder]]" = None,
    ) -> "BindingConfig":
        """Resolve ``driver`` into a configuration. See :func:`resolve_placeholder`."""
        if strict is None:
            strict = strict_driver_default()
        placeholder = resolve_placeholder(driver, strict=strict, overrides=overrides)
        return cls(driver=driver, placeholder=placeholder, strict=strict)

    @property
    def is_fallback(self) -> bool:
        """Whether the driver was not recognized."""
        known = _normalize_driver(self.driver) in DEFAULT_DRIVER_PLACEHOLDERS
        return not known and self.placeholder is FALLBACK_PLACEHOLDER

    def compile(self, sql: str, name: str = "") -> QueryArtifact:
        return compile_query(sql, self.placeholder, name=name)
