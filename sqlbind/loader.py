"""Route configuration loader.

Routes map an HTTP method and path pattern to a list of named SQL statements.
Two file formats are understood.

``<base>.conf``, a line oriented format::

    sqlite3 file:app.db?mode=ro

    GET /users/:id
    user: SELECT * FROM users WHERE id = :id
    orders: SELECT * FROM orders
        WHERE user_id = :id

    POST /users/:id/delete
    delete: DELETE FROM users WHERE id = :id

The first line holds the driver and its data source options. Routes are
separated by blank lines; an indented line continues the previous statement.

``<base>.yaml``::

    db:
      driver: postgres
      options: dbname=app
    pages:
      - pattern: /users/:id
        method: GET
        queries:
          user: SELECT * FROM users WHERE id = :id

Every statement is compiled for the configured driver while loading.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Optional, Union

import yaml

from sqlbind.core.binder import QueryArtifact
from sqlbind.core.config import BindingConfig
from sqlbind.exceptions import ConfigFileNotFoundError, ConfigParseError
from sqlbind.utils.logging import get_logger, log_with_context

__all__ = ("CONFIG_SUFFIXES", "HTTP_METHODS", "Route", "RouteConfig", "load_config", "parse_conf", "parse_yaml")

logger = get_logger("loader")

HTTP_METHODS: Final = ("GET", "POST")
CONFIG_SUFFIXES: Final = (".conf", ".yaml", ".yml")
DEFAULT_SOURCE: Final = "<string>"


@dataclass(frozen=True)
class Route:
    """Compiled statements served on one method and path pattern."""

    pattern: str
    method: str
    queries: "tuple[QueryArtifact, ...]"

    @property
    def parameters(self) -> "tuple[str, ...]":
        """Distinct parameter names used by any query of the route."""
        return tuple(dict.fromkeys(name for query in self.queries for name in query.parameters))


@dataclass(frozen=True)
class RouteConfig:
    """A fully loaded route configuration."""

    driver: str
    options: str
    binding: BindingConfig
    routes: "tuple[Route, ...]"

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    def get_route(self, pattern: str, method: str = "GET") -> Route:
        """Look up a route.

        Raises:
            KeyError: If no route is registered for ``method`` and ``pattern``.
        """
        for route in self.routes:
            if route.pattern == pattern and route.method == method.upper():
                return route
        msg = f"{method.upper()} {pattern}"
        raise KeyError(msg)


class _RouteCollector:
    """Compiles and registers routes for one configuration source."""

    __slots__ = ("_seen", "binding", "routes", "source")

    def __init__(self, binding: BindingConfig, source: str) -> None:
        self.binding = binding
        self.source = source
        self.routes: list[Route] = []
        self._seen: set[tuple[str, str]] = set()

    def register(
        self, method: str, pattern: str, queries: "list[tuple[str, str]]", line: Optional[int] = None
    ) -> None:
        if method not in HTTP_METHODS:
            raise ConfigParseError(self.source, f"{pattern}: invalid method {method!r}", line)
        if (method, pattern) in self._seen:
            raise ConfigParseError(self.source, f"duplicate route {method} {pattern}", line)
        self._seen.add((method, pattern))
        compiled = tuple(self.binding.compile(sql, name=name) for name, sql in queries)
        log_with_context(
            logger,
            logging.INFO,
            f"{method:<4} {pattern!r} {[query.name for query in compiled]}",
            method=method,
            pattern=pattern,
            queries=[query.name for query in compiled],
        )
        self.routes.append(Route(pattern=pattern, method=method, queries=compiled))

    def build(self, driver: str, options: str) -> RouteConfig:
        return RouteConfig(driver=driver, options=options, binding=self.binding, routes=tuple(self.routes))


class _ConfParser:
    """Line oriented parser of the ``.conf`` format."""

    __slots__ = ("_collector", "_line", "_method", "_path", "_path_line", "_queries", "_query_parts")

    def __init__(self, collector: _RouteCollector) -> None:
        self._collector = collector
        self._line = 0
        self._path = ""
        self._path_line = 0
        self._method = ""
        self._queries: list[tuple[str, str]] = []
        self._query_parts: list[str] = []

    def _error(self, message: str) -> ConfigParseError:
        return ConfigParseError(self._collector.source, message, self._line)

    def feed(self, line: str, lineno: int) -> None:
        self._line = lineno
        stripped = line.strip()
        if not stripped:
            if self._path:
                self._register()
            return

        if not line[0].isspace():
            head = stripped.split(None, 1)[0]
            if head in HTTP_METHODS:
                self._start_route(stripped)
                return
            self._start_query(stripped)
            return

        if not self._query_parts:
            raise self._error("continuation line without a query")
        self._query_parts.append(stripped)

    def close(self, lineno: int) -> None:
        self._line = lineno
        if self._path:
            self._register()

    def _start_route(self, stripped: str) -> None:
        if self._path:
            raise self._error("routes must be separated by a blank line")
        fields = stripped.split()
        if len(fields) != 2:
            raise self._error("invalid path line")
        self._method, self._path = fields
        self._path_line = self._line

    def _start_query(self, stripped: str) -> None:
        if not self._path:
            raise self._error("query outside of a route; expected 'GET <pattern>' or 'POST <pattern>'")
        self._flush_query()
        name, sep, sql = stripped.partition(":")
        if not sep:
            raise self._error("missing ':'")
        self._queries.append((name.strip(), ""))
        self._query_parts = [sql.strip()]

    def _flush_query(self) -> None:
        if self._query_parts:
            name, _ = self._queries[-1]
            self._queries[-1] = (name, " ".join(part for part in self._query_parts if part))
            self._query_parts = []

    def _register(self) -> None:
        self._flush_query()
        self._collector.register(self._method, self._path, self._queries, self._path_line)
        self._path = ""
        self._method = ""
        self._queries = []


def _split_driver_line(line: str) -> "tuple[str, str]":
    driver, _, options = line.strip().partition(" ")
    return driver.strip(), options.strip()


def parse_conf(text: str, *, source: str = DEFAULT_SOURCE, strict: Optional[bool] = None) -> RouteConfig:
    """Parse the ``.conf`` route format.

    Args:
        text: File content
        source: Name used in error messages
        strict: Reject unknown drivers (see :meth:`BindingConfig.for_driver`)

    Raises:
        ConfigParseError: If the content is malformed.
        UnknownDriverError: If ``strict`` and the driver is not known.

    Returns:
        The loaded configuration.
    """
    lines = text.splitlines()
    if not lines or not lines[0].strip():
        raise ConfigParseError(source, "first line must name the database driver", 1)

    driver, options = _split_driver_line(lines[0])
    collector = _RouteCollector(BindingConfig.for_driver(driver, strict=strict), source)
    parser = _ConfParser(collector)
    for lineno, line in enumerate(lines[1:], start=2):
        parser.feed(line, lineno)
    parser.close(len(lines))
    return collector.build(driver, options)


def _yaml_queries(source: str, pattern: str, queries: Any) -> "list[tuple[str, str]]":
    if queries is None:
        return []
    if not isinstance(queries, dict):
        raise ConfigParseError(source, f"{pattern}: queries must be a mapping of name to SQL")
    result: list[tuple[str, str]] = []
    for name, sql in queries.items():
        if isinstance(sql, bytes):
            sql = sql.decode("utf-8")
        if not isinstance(sql, str):
            raise ConfigParseError(source, f"{pattern}:{name}: invalid SQL query")
        result.append((str(name), sql))
    return result


def parse_yaml(text: str, *, source: str = DEFAULT_SOURCE, strict: Optional[bool] = None) -> RouteConfig:
    """Parse the YAML route format.

    Args:
        text: File content
        source: Name used in error messages
        strict: Reject unknown drivers (see :meth:`BindingConfig.for_driver`)

    Raises:
        ConfigParseError: If the content is malformed.
        UnknownDriverError: If ``strict`` and the driver is not known.

    Returns:
        The loaded configuration.
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        raise ConfigParseError(source, f"invalid YAML: {e}", line) from e

    if not isinstance(document, dict):
        raise ConfigParseError(source, "expected a mapping with 'db' and 'pages' keys")
    db = document.get("db") or {}
    if not isinstance(db, dict) or not db.get("driver"):
        raise ConfigParseError(source, "db.driver must be set")
    driver = str(db["driver"]).strip()
    options = str(db.get("options") or "").strip()

    pages = document.get("pages")
    if pages is None:
        pages = []
    if not isinstance(pages, list):
        raise ConfigParseError(source, "pages must be a list")

    collector = _RouteCollector(BindingConfig.for_driver(driver, strict=strict), source)
    for page in pages:
        if not isinstance(page, dict):
            raise ConfigParseError(source, "each page must be a mapping")
        pattern = str(page.get("pattern") or "")
        if not pattern:
            raise ConfigParseError(source, f"pages.pattern must be non-empty; found {pattern!r}")
        method = str(page.get("method") or "")
        queries = _yaml_queries(source, pattern, page.get("queries"))
        collector.register(method, pattern, queries)
    return collector.build(driver, options)


def _read_text(path: Path, encoding: str) -> str:
    try:
        return path.read_text(encoding=encoding)
    except FileNotFoundError as e:
        raise ConfigFileNotFoundError(str(path)) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(str(path), f"unable to read file: {e}") from e


def load_config(
    base: Union[str, Path], *, strict: Optional[bool] = None, encoding: str = "utf-8"
) -> RouteConfig:
    """Load the route configuration stored next to ``base``.

    ``base`` is either a file with a known suffix or a base name, in which case
    ``<base>.conf``, ``<base>.yaml`` and ``<base>.yml`` are looked up. Exactly
    one of them may exist.

    Raises:
        ConfigFileNotFoundError: If no configuration file exists.
        ConfigParseError: If several exist or the content is malformed.

    Returns:
        The loaded configuration.
    """
    base_path = Path(base)
    if base_path.suffix in CONFIG_SUFFIXES:
        if not base_path.is_file():
            raise ConfigFileNotFoundError(str(base_path))
        candidates = [base_path]
    else:
        tried = [base_path.with_name(base_path.name + suffix) for suffix in CONFIG_SUFFIXES]
        candidates = [path for path in tried if path.is_file()]
        if not candidates:
            raise ConfigFileNotFoundError(str(base_path), " or ".join(str(path) for path in tried))
        if len(candidates) > 1:
            raise ConfigParseError(
                str(base_path), f"several config files exist: {', '.join(str(path) for path in candidates)}"
            )

    path = candidates[0]
    text = _read_text(path, encoding)
    logger.debug("Loading route configuration from %s", path)
    if path.suffix == ".conf":
        return parse_conf(text, source=str(path), strict=strict)
    return parse_yaml(text, source=str(path), strict=strict)
