"""Tokenizer, placeholder translation and bind variable rewriting."""

from sqlbind.core.binder import BoundValues, QueryArtifact, bind_named_parameters, bind_values, compile_query
from sqlbind.core.config import (
    DEFAULT_DRIVER_PLACEHOLDERS,
    FALLBACK_PLACEHOLDER,
    BindingConfig,
    resolve_placeholder,
)
from sqlbind.core.placeholders import BIND_MARKER, Placeholder, PlaceholderStyle, translate
from sqlbind.core.tokenizer import SQLTokenizer, Token, TokenType, tokenize

__all__ = (
    "BIND_MARKER",
    "DEFAULT_DRIVER_PLACEHOLDERS",
    "FALLBACK_PLACEHOLDER",
    "BindingConfig",
    "BoundValues",
    "Placeholder",
    "PlaceholderStyle",
    "QueryArtifact",
    "SQLTokenizer",
    "Token",
    "TokenType",
    "bind_named_parameters",
    "bind_values",
    "compile_query",
    "resolve_placeholder",
    "tokenize",
    "translate",
)
