"""Unit tests for the SQL tokenizer."""

import pytest

from sqlbind.core.tokenizer import SQLTokenizer, Token, TokenType, tokenize

WS = TokenType.WHITESPACE
ID = TokenType.IDENTIFIER
OP = TokenType.OPERATOR
NUM = TokenType.NUMERIC


def kinds(sql: str) -> "list[tuple[TokenType, str]]":
    """Tokenize and drop the trailing EOF marker."""
    tokens = list(tokenize(sql))
    assert tokens[-1].type is TokenType.EOF
    return [(token.type, token.value) for token in tokens[:-1]]


def test_empty_input_yields_only_eof() -> None:
    tokens = list(tokenize(""))
    assert tokens == [Token(TokenType.EOF, 0, "")]


def test_mixed_statement() -> None:
    sql = "SELECT /* comment /* nested */ ... */ \"me\" FROM them \t-- comment\n'a string' + 0.12e-5"
    assert kinds(sql) == [
        (ID, "SELECT"),
        (WS, " "),
        (TokenType.COMMENT_BLOCK, "/* comment /* nested */ ... */"),
        (WS, " "),
        (TokenType.QUOTED_IDENTIFIER, '"me"'),
        (WS, " "),
        (ID, "FROM"),
        (WS, " "),
        (ID, "them"),
        (WS, " \t"),
        (TokenType.COMMENT_LINE, "-- comment\n"),
        (TokenType.STRING_LITERAL, "'a string'"),
        (WS, " "),
        (OP, "+"),
        (WS, " "),
        (NUM, "0.12e-5"),
    ]


def test_positions_are_offsets_into_source() -> None:
    sql = "SELECT a,\n  :b"
    tokens = list(tokenize(sql))
    for token in tokens:
        assert sql[token.position : token.end] == token.value
    assert tokens[-1] == Token(TokenType.EOF, len(sql), "")


@pytest.mark.parametrize(
    "sql",
    [
        "",
        "SELECT * FROM t WHERE a = :a AND b = ':b' -- :c\n/* :d /* :e */ */",
        "'unterminated :x",
        '"unterminated identifier',
        "/* never closed /* nested",
        "x::int + .5e+3.2.1 ?? ??( ??) || -> != <> >= <= ..",
        "naïve café = 'déjà vu' AND ü = :ü",
        "@a #b $c ~d !e `f` &g |h ^i %j",
        "\r\n\t  ",
    ],
)
def test_tokens_cover_input_exactly(sql: str) -> None:
    tokens = list(tokenize(sql))
    assert "".join(token.value for token in tokens) == sql
    assert [token.type for token in tokens].count(TokenType.EOF) == 1
    position = 0
    for token in tokens:
        assert token.position == position
        position = token.end
    assert position == len(sql)


class TestComments:
    def test_nested_block_comment_is_one_token(self) -> None:
        assert kinds("/* a /* b */ c */") == [(TokenType.COMMENT_BLOCK, "/* a /* b */ c */")]

    def test_inner_closer_does_not_end_outer_comment(self) -> None:
        assert kinds("/* a /* b */ c */ d") == [
            (TokenType.COMMENT_BLOCK, "/* a /* b */ c */"),
            (WS, " "),
            (ID, "d"),
        ]

    def test_unterminated_block_comment_runs_to_end(self) -> None:
        tokens = list(tokenize("SELECT /* a /* b */"))
        assert [(token.type, token.value) for token in tokens] == [
            (ID, "SELECT"),
            (WS, " "),
            (TokenType.COMMENT_BLOCK, "/* a /* b */"),
            (TokenType.EOF, ""),
        ]

    def test_line_comment_includes_newline(self) -> None:
        assert kinds("a--b\nc") == [(ID, "a"), (TokenType.COMMENT_LINE, "--b\n"), (ID, "c")]

    def test_line_comment_at_end_of_input(self) -> None:
        assert kinds("1 -- done") == [(NUM, "1"), (WS, " "), (TokenType.COMMENT_LINE, "-- done")]

    def test_single_minus_and_solidus_are_operators(self) -> None:
        assert kinds("a-b/c") == [(ID, "a"), (OP, "-"), (ID, "b"), (OP, "/"), (ID, "c")]


class TestQuoting:
    def test_doubled_double_quote(self) -> None:
        assert kinds('"a""b"') == [(TokenType.QUOTED_IDENTIFIER, '"a""b"')]

    def test_doubled_single_quote(self) -> None:
        assert kinds("'it''s' x") == [(TokenType.STRING_LITERAL, "'it''s'"), (WS, " "), (ID, "x")]

    def test_adjacent_strings_split_on_lone_quote(self) -> None:
        assert kinds("'a' 'b'") == [(TokenType.STRING_LITERAL, "'a'"), (WS, " "), (TokenType.STRING_LITERAL, "'b'")]

    def test_unterminated_string_runs_to_end(self) -> None:
        assert kinds("'abc :x") == [(TokenType.STRING_LITERAL, "'abc :x")]

    def test_unterminated_string_ending_in_escaped_quote(self) -> None:
        assert kinds("'ab''") == [(TokenType.STRING_LITERAL, "'ab''")]

    def test_other_quote_kind_is_plain_content(self) -> None:
        assert kinds("'say \"hi\"'") == [(TokenType.STRING_LITERAL, "'say \"hi\"'")]


class TestNumeric:
    @pytest.mark.parametrize("literal", ["0", "42", "3.14", ".5", "5.", "1e10", "1E+10", "0.12e-5", "1.5e2.5"])
    def test_single_numeric_token(self, literal: str) -> None:
        assert kinds(literal) == [(NUM, literal)]

    def test_fraction_resets_after_exponent(self) -> None:
        assert kinds(".12e-5+.012") == [(NUM, ".12e-5"), (OP, "+"), (NUM, ".012")]

    def test_second_fraction_point_starts_new_token(self) -> None:
        assert kinds("1.2.3") == [(NUM, "1.2"), (NUM, ".3")]

    def test_second_fraction_point_after_exponent(self) -> None:
        assert kinds("1.5e2.5.1") == [(NUM, "1.5e2.5"), (NUM, ".1")]

    def test_second_exponent_ends_token(self) -> None:
        assert kinds("1e5e6") == [(NUM, "1e5"), (ID, "e6")]

    def test_period_without_digit_is_operator(self) -> None:
        assert kinds("t.col") == [(ID, "t"), (OP, "."), (ID, "col")]


class TestOperators:
    def test_two_character_operators(self) -> None:
        assert kinds("a<=b<>c>=d||e::f..g->h!=i") == [
            (ID, "a"),
            (OP, "<="),
            (ID, "b"),
            (OP, "<>"),
            (ID, "c"),
            (OP, ">="),
            (ID, "d"),
            (OP, "||"),
            (ID, "e"),
            (OP, "::"),
            (ID, "f"),
            (OP, ".."),
            (ID, "g"),
            (OP, "->"),
            (ID, "h"),
            (OP, "!="),
            (ID, "i"),
        ]

    def test_three_character_operators(self) -> None:
        assert kinds("??(1??)") == [(OP, "??("), (NUM, "1"), (OP, "??)")]

    @pytest.mark.parametrize("char", list("()[],;.+-^*/%<>="))
    def test_single_character_operators(self, char: str) -> None:
        assert kinds(f"x {char} y") == [(ID, "x"), (WS, " "), (OP, char), (WS, " "), (ID, "y")]

    @pytest.mark.parametrize("text", ["?", "|", "!", ":"])
    def test_unknown_operator_falls_through_to_identifier(self, text: str) -> None:
        assert kinds(f"x {text} y") == [(ID, "x"), (WS, " "), (ID, text), (WS, " "), (ID, "y")]


class TestIdentifiers:
    def test_bind_variable_is_identifier(self) -> None:
        assert kinds("id=:id") == [(ID, "id"), (OP, "="), (ID, ":id")]

    def test_bind_variable_followed_by_cast(self) -> None:
        assert kinds(":a::int") == [(ID, ":a"), (OP, "::"), (ID, "int")]

    @pytest.mark.parametrize("text", ["@name", "$1", "#tmp", "~x", "`q"])
    def test_delimiter_starts_identifier(self, text: str) -> None:
        assert kinds(text) == [(ID, text)]

    def test_non_ascii_identifier(self) -> None:
        assert kinds("café = :ü") == [(ID, "café"), (WS, " "), (OP, "="), (WS, " "), (ID, ":ü")]


class TestIteration:
    def test_tokenizer_is_lazy(self) -> None:
        tokenizer = SQLTokenizer("a b c")
        assert next(tokenizer) == Token(ID, 0, "a")
        assert next(tokenizer) == Token(WS, 1, " ")

    def test_tokenizer_cannot_be_restarted(self) -> None:
        tokenizer = SQLTokenizer("a")
        assert [token.type for token in tokenizer] == [ID, TokenType.EOF]
        assert list(tokenizer) == []
        with pytest.raises(StopIteration):
            next(tokenizer)

    def test_each_tokenize_call_is_a_fresh_scan(self) -> None:
        assert list(tokenize("x + 1")) == list(tokenize("x + 1"))

    def test_token_repr(self) -> None:
        assert repr(Token(ID, 3, "foo")) == "Token(IDENTIFIER, 3, 'foo')"
