import pytest

from alchemy_engine.grammar.tokens import (
    is_flag,
    is_number,
    peek_args,
    quote_literal,
    split_literal_args,
    tokenize,
)


@pytest.mark.parametrize("token", ["-blur", "+noise", "-auto-level", "+channel", "-x"])
def test_is_flag_accepts_flags(token: str):
    assert is_flag(token)


@pytest.mark.parametrize("token", ["-10", "+5+5", "-.5", "-0.5", "-", "+", "blur", "", "-Infinity", "1e3"])
def test_is_flag_rejects_arguments(token: str):
    assert not is_flag(token)


def test_is_number():
    assert is_number("12")
    assert is_number("-0.5")
    assert is_number("1e-3")
    assert not is_number("0x5")
    assert not is_number("50%")


def test_tokenize_keeps_quotes_and_splits_parens():
    tokens = tokenize("( +clone -fx 'u+(rand()-0.5)' ) -composite")
    assert tokens == ["(", "+clone", "-fx", "'u+(rand()-0.5)'", ")", "-composite"]


def test_tokenize_parens_glued_to_flags():
    assert tokenize("(-negate)") == ["(", "-negate", ")"]


def test_tokenize_unterminated_quote_runs_to_end():
    assert tokenize("-fx 'u*2 -negate") == ["-fx", "'u*2 -negate"]


def test_tokenize_collapses_whitespace():
    assert tokenize("  -blur\t 3   -negate ") == ["-blur", "3", "-negate"]


def test_split_literal_args_strips_quotes():
    args = split_literal_args("-fill 'rgb(1, 2, 3)' -fx \"a b\"")
    assert args == ["-fill", "rgb(1, 2, 3)", "-fx", "a b"]


def test_split_literal_args_backslash_escape():
    assert split_literal_args(r"-fx a\ b") == ["-fx", "a b"]
    assert split_literal_args(r"-fx 'it\'s'") == ["-fx", "it's"]


def test_split_literal_args_keeps_parens_inline():
    assert split_literal_args("( -negate )") == ["(", "-negate", ")"]
    assert split_literal_args("(-negate)") == ["(-negate)"]


def test_quote_literal_leaves_plain_values():
    assert quote_literal("Laplacian") == "Laplacian"
    assert quote_literal("#00ffcc") == "#00ffcc"


@pytest.mark.parametrize("value", ["a b", "u+(rand()-0.5)", "it's", "back\\slash", 'say "hi"'])
def test_quote_literal_reads_back_as_one_token(value: str):
    quoted = quote_literal(value)
    assert quoted != value
    assert split_literal_args(quoted) == [value]


def test_peek_args_stops_at_flag_or_group():
    tokens = ["-evaluate", "Sin", "2", "-negate", "3"]
    assert peek_args(tokens, 1) == ["Sin", "2"]
    assert peek_args(["-blur", "3", ")", "4"], 1) == ["3"]
    assert peek_args(tokens, 10) == []
