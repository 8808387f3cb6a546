"""Permissive SQL tokenizer.

Splits SQL text into a handful of token kinds, enough to locate bind
variables without misreading quoted text or comments:

- WHITESPACE: runs of space, tab, CR and LF
- COMMENT_LINE: ``--`` up to and including the next newline
- COMMENT_BLOCK: ``/* ... */``, nesting allowed
- IDENTIFIER: any other run of characters (keywords and ``:name`` included)
- QUOTED_IDENTIFIER: ``"..."`` with ``""`` as an embedded quote
- STRING_LITERAL: ``'...'`` with ``''`` as an embedded quote
- NUMERIC: ``12``, ``.5``, ``1.5e-3``
- OPERATOR: ``??(`` ``??)``, ``<= <> >= || :: .. -> !=`` and single characters
- EOF: empty marker emitted once after the input is consumed

The lexical rules follow the PostgreSQL lexical structure. Nothing is
validated: unterminated quotes and comments run to the end of the input.

Concatenating the values of all tokens reproduces the input exactly.
"""

import re
from collections.abc import Iterator
from enum import Enum
from typing import Final

from mypy_extensions import mypyc_attr

__all__ = ("SQLTokenizer", "Token", "TokenType", "tokenize")

WHITESPACE_CHARS: Final = " \t\r\n"
DIGITS: Final = frozenset("0123456789")
OPERATOR_START: Final = frozenset("?()<=>|:.![],;+-^*/%")
DELIMITERS: Final = WHITESPACE_CHARS + "'\"()[],;$:.+-*/<>=~!@#%^&|`?"

THREE_CHAR_OPERATORS: Final = frozenset({"??(", "??)"})
TWO_CHAR_OPERATORS: Final = frozenset({"<=", "<>", ">=", "||", "::", "..", "->", "!="})
ONE_CHAR_OPERATORS: Final = frozenset("()[],;.+-^*/%<>=")

_WHITESPACE_RUN = re.compile(r"[ \t\r\n]*")
_IDENTIFIER_TAIL = re.compile("[^" + re.escape(DELIMITERS) + "]*")
_BLOCK_COMMENT_DELIMITER = re.compile(r"/\*|\*/")


class TokenType(Enum):
    """Kinds of tokens produced by :class:`SQLTokenizer`."""

    WHITESPACE = "WHITESPACE"
    COMMENT_LINE = "COMMENT_LINE"
    COMMENT_BLOCK = "COMMENT_BLOCK"
    IDENTIFIER = "IDENTIFIER"
    QUOTED_IDENTIFIER = "QUOTED_IDENTIFIER"
    STRING_LITERAL = "STRING_LITERAL"
    NUMERIC = "NUMERIC"
    OPERATOR = "OPERATOR"
    EOF = "EOF"


@mypyc_attr(allow_interpreted_subclasses=False)
class Token:
    """A classified slice of the source text.

    Attributes:
        type: Token kind
        position: Offset of the first character in the source string
        value: The exact source text of the token
    """

    __slots__ = ("position", "type", "value")

    def __init__(self, type: TokenType, position: int, value: str) -> None:
        self.type = type
        self.position = position
        self.value = value

    @property
    def end(self) -> int:
        """Offset just past the last character of the token."""
        return self.position + len(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.type is other.type and self.position == other.position and self.value == other.value

    def __hash__(self) -> int:
        return hash((self.type, self.position, self.value))

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.position}, {self.value!r})"


@mypyc_attr(allow_interpreted_subclasses=False)
class SQLTokenizer:
    """Single-pass, pull-based SQL scanner.

    The tokenizer is its own iterator: every call to ``next`` scans exactly one
    token. Once the ``EOF`` token has been returned the iterator is exhausted
    and cannot be rewound; scan the text again with a new instance.
    """

    __slots__ = ("_comment_depth", "_done", "_pos", "_sql", "_start")

    def __init__(self, sql: str) -> None:
        self._sql = sql
        self._pos = 0
        self._start = 0
        self._comment_depth = 0
        self._done = False

    def __iter__(self) -> "SQLTokenizer":
        return self

    def __next__(self) -> Token:
        if self._done:
            raise StopIteration
        self._start = self._pos
        if self._pos >= len(self._sql):
            self._done = True
            return self._emit(TokenType.EOF)
        return self._emit(self._lex_any())

    def _emit(self, token_type: TokenType) -> Token:
        token = Token(token_type, self._start, self._sql[self._start : self._pos])
        self._start = self._pos
        return token

    def _peek(self) -> str:
        return self._sql[self._pos : self._pos + 1]

    def _lex_any(self) -> TokenType:
        char = self._sql[self._pos]
        self._pos += 1
        if char == "'":
            return self._lex_quoted("'", TokenType.STRING_LITERAL)
        if char == '"':
            return self._lex_quoted('"', TokenType.QUOTED_IDENTIFIER)
        if char == "-" and self._peek() == "-":
            self._pos += 1
            return self._lex_line_comment()
        if char == "/" and self._peek() == "*":
            self._pos += 1
            return self._lex_block_comment()
        if char in DIGITS or (char == "." and self._peek() in DIGITS):
            self._pos = self._start
            return self._lex_numeric()
        if char in WHITESPACE_CHARS:
            self._pos = _WHITESPACE_RUN.match(self._sql, self._pos).end()  # type: ignore[union-attr]
            return TokenType.WHITESPACE
        if char in OPERATOR_START:
            return self._lex_operator()
        return self._lex_identifier()

    def _lex_operator(self) -> TokenType:
        candidate = self._sql[self._start : self._start + 3]
        if candidate in THREE_CHAR_OPERATORS:
            self._pos = self._start + 3
            return TokenType.OPERATOR
        if candidate[:2] in TWO_CHAR_OPERATORS:
            self._pos = self._start + 2
            return TokenType.OPERATOR
        if candidate[:1] in ONE_CHAR_OPERATORS:
            return TokenType.OPERATOR
        return self._lex_identifier()

    def _lex_identifier(self) -> TokenType:
        self._pos = _IDENTIFIER_TAIL.match(self._sql, self._pos).end()  # type: ignore[union-attr]
        return TokenType.IDENTIFIER

    def _lex_quoted(self, quote: str, token_type: TokenType) -> TokenType:
        sql = self._sql
        while True:
            index = sql.find(quote, self._pos)
            if index < 0:
                self._pos = len(sql)
                break
            self._pos = index + 1
            # a doubled quote is an escaped quote, keep going
            if self._peek() != quote:
                break
            self._pos += 1
        return token_type

    def _lex_numeric(self) -> TokenType:
        sql = self._sql
        length = len(sql)
        is_fraction = False
        is_exponent = False
        while self._pos < length:
            char = sql[self._pos]
            if char in DIGITS:
                pass
            elif char in "eE":
                if is_exponent:
                    break
                is_exponent = True
                is_fraction = False
                if sql[self._pos + 1 : self._pos + 2] in {"+", "-"}:
                    self._pos += 1
            elif char == ".":
                if is_fraction:
                    break
                is_fraction = True
            else:
                break
            self._pos += 1
        return TokenType.NUMERIC

    def _lex_line_comment(self) -> TokenType:
        index = self._sql.find("\n", self._pos)
        self._pos = len(self._sql) if index < 0 else index + 1
        return TokenType.COMMENT_LINE

    def _lex_block_comment(self) -> TokenType:
        self._comment_depth = 1
        for match in _BLOCK_COMMENT_DELIMITER.finditer(self._sql, self._pos):
            self._comment_depth += 1 if match.group() == "/*" else -1
            if self._comment_depth == 0:
                self._pos = match.end()
                return TokenType.COMMENT_BLOCK
        # unterminated: every open level closes at end of input
        self._comment_depth = 0
        self._pos = len(self._sql)
        return TokenType.COMMENT_BLOCK


def tokenize(sql: str) -> Iterator[Token]:
    """Lazily tokenize ``sql``.

    Args:
        sql: SQL text to scan

    Returns:
        An iterator over the tokens of ``sql``, ending with a single ``EOF`` token.
    """
    return SQLTokenizer(sql)
