"""Named bind variable rewriting.

Configured SQL refers to runtime values as ``:name``. Binding walks the token
stream of a statement once, collects the names in source order and rewrites
every occurrence with the placeholder text of the target driver::

    >>> sql, names = bind_named_parameters("SELECT * FROM t WHERE a = :a OR b = :a", Placeholder.numbered())
    >>> sql
    'SELECT * FROM t WHERE a = $1 OR b = $2'
    >>> names
    ('a', 'a')

Quoted identifiers, string literals and comments are never inspected.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from typing_extensions import TypeAlias

from sqlbind.core.placeholders import BIND_MARKER, Placeholder
from sqlbind.core.tokenizer import TokenType, tokenize
from sqlbind.exceptions import MissingParameterError
from sqlbind.utils.logging import get_logger

__all__ = ("BoundValues", "QueryArtifact", "bind_named_parameters", "bind_values", "compile_query")

BoundValues: TypeAlias = "Union[tuple[Any, ...], dict[str, Any]]"
"""Values in driver order, or keyed by name when the placeholder keeps names."""

logger = get_logger("core.binder")


@dataclass(frozen=True)
class QueryArtifact:
    """A configured statement prepared for one driver.

    Built once at start-up and shared read-only afterwards.
    """

    name: str
    """Query name, as given in the route configuration."""

    sql: str
    """The statement as configured, with ``:name`` bind variables."""

    rewritten_sql: str
    """The statement handed to the driver."""

    parameters: "tuple[str, ...]"
    """Parameter names in order of appearance, duplicates included."""

    placeholder: Placeholder
    """Placeholder convention used for :attr:`rewritten_sql`."""

    @property
    def parameter_names(self) -> "tuple[str, ...]":
        """Distinct parameter names, in order of first appearance."""
        return tuple(dict.fromkeys(self.parameters))

    def bind(self, values: "Mapping[str, Any]") -> BoundValues:
        return bind_values(self, values)


def bind_named_parameters(sql: str, placeholder: Placeholder) -> "tuple[str, tuple[str, ...]]":
    """Rewrite the bind variables of ``sql`` for ``placeholder``.

    Args:
        sql: SQL text with ``:name`` bind variables
        placeholder: Target driver convention

    Returns:
        The rewritten SQL and the ordered parameter names. Without bind
        variables the SQL is returned unchanged with an empty name tuple.
    """
    names: list[str] = []
    chunks: list[str] = []
    offset = 0
    for token in tokenize(sql):
        if token.type is not TokenType.IDENTIFIER or not token.value.startswith(BIND_MARKER):
            continue
        chunks.append(sql[offset : token.position])
        chunks.append(placeholder.translate(token.value, len(names)))
        names.append(token.value[len(BIND_MARKER) :])
        offset = token.end

    if not names:
        return sql, ()
    chunks.append(sql[offset:])
    return "".join(chunks), tuple(names)


def compile_query(sql: str, placeholder: Placeholder, name: str = "") -> QueryArtifact:
    """Build the :class:`QueryArtifact` of one configured statement."""
    rewritten_sql, parameters = bind_named_parameters(sql, placeholder)
    logger.debug("Compiled query %r for %s: %r %s", name, placeholder, rewritten_sql, list(parameters))
    return QueryArtifact(
        name=name, sql=sql, rewritten_sql=rewritten_sql, parameters=parameters, placeholder=placeholder
    )


def bind_values(artifact: QueryArtifact, values: "Mapping[str, Any]") -> BoundValues:
    """Arrange runtime values the way the driver expects them.

    Args:
        artifact: Compiled query
        values: Runtime values by parameter name. Keys not used by the query are ignored.

    Raises:
        MissingParameterError: If ``values`` lacks any parameter of the query.

    Returns:
        A dict keyed by name when the rewritten SQL refers to parameters by
        name, otherwise a tuple with one value per occurrence.
    """
    missing = tuple(name for name in artifact.parameter_names if name not in values)
    if missing:
        raise MissingParameterError(missing, sql=artifact.rewritten_sql)
    if artifact.placeholder.keeps_names:
        return {name: values[name] for name in artifact.parameter_names}
    return tuple(values[name] for name in artifact.parameters)
