"""sqlbind: driver-aware rewriting of named bind variables in configured SQL."""

from sqlbind import core, exceptions, loader, utils
from sqlbind.__metadata__ import __version__
from sqlbind.core import (
    BIND_MARKER,
    BindingConfig,
    Placeholder,
    PlaceholderStyle,
    QueryArtifact,
    Token,
    TokenType,
    bind_named_parameters,
    bind_values,
    compile_query,
    resolve_placeholder,
    tokenize,
    translate,
)
from sqlbind.exceptions import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ImproperConfigurationError,
    MissingParameterError,
    SQLBindError,
    UnknownDriverError,
)
from sqlbind.loader import Route, RouteConfig, load_config, parse_conf, parse_yaml

__all__ = (
    "BIND_MARKER",
    "BindingConfig",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ImproperConfigurationError",
    "MissingParameterError",
    "Placeholder",
    "PlaceholderStyle",
    "QueryArtifact",
    "Route",
    "RouteConfig",
    "SQLBindError",
    "Token",
    "TokenType",
    "UnknownDriverError",
    "__version__",
    "bind_named_parameters",
    "bind_values",
    "compile_query",
    "core",
    "exceptions",
    "load_config",
    "loader",
    "parse_conf",
    "parse_yaml",
    "resolve_placeholder",
    "tokenize",
    "translate",
    "utils",
)
