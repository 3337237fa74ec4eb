from __future__ import annotations

import pytest

from shallot.exceptions import PatternError
from shallot.patterns import (
    Literal,
    Param,
    build_template,
    compile_template,
    join_templates,
    normalize_template,
    param,
    parse_template,
)


def test_parse_template_splits_literals_and_params() -> None:
    assert parse_template("/users/:id") == (Literal("/users/"), Param("id"))
    assert parse_template("/users/:userId/books/:bookId") == (
        Literal("/users/"),
        Param("userId"),
        Literal("/books/"),
        Param("bookId"),
    )


def test_trailing_separator_is_normalized() -> None:
    assert normalize_template("/api/users/") == "/api/users"
    assert normalize_template("/") == "/"
    assert parse_template("/api/users/") == parse_template("/api/users")


def test_round_trip_single_parameter() -> None:
    pattern = compile_template("/users/:id")
    assert pattern.param_names == ("id",)
    assert pattern.match("/users/123") == ("123",)
    assert pattern.match("/users") is None
    assert pattern.match("/users/123/posts") is None


def test_trailing_slash_equivalence() -> None:
    for template in ("/api/users", "/api/users/"):
        pattern = compile_template(template)
        assert pattern.match("/api/users") == ()
        assert pattern.match("/api/users/") == ()


def test_root_template_matches_root_only() -> None:
    pattern = compile_template("/")
    assert pattern.match("/") == ()
    assert pattern.match("/other") is None


def test_literal_regex_characters_are_escaped() -> None:
    pattern = compile_template("/files/a.b+c")
    assert pattern.match("/files/a.b+c") == ()
    assert pattern.match("/files/aXb+c") is None
    assert pattern.match("/files/a.bbc") is None


def test_custom_parameter_expression() -> None:
    pattern = compile_template(r"/items/:id(\d+)")
    assert pattern.match("/items/42") == ("42",)
    assert pattern.match("/items/abc") is None


def test_unnamed_groups_are_numbered() -> None:
    pattern = compile_template("(.*)")
    assert pattern.param_names == ("0",)
    assert pattern.match("/anything/at/all") == ("/anything/at/all",)
    assert compile_template("/static/(.*)/v/(\\d+)").param_names == ("0", "1")


def test_matching_is_case_insensitive_by_default() -> None:
    assert compile_template("/users/:id").match("/USERS/7") == ("7",)
    assert compile_template("/users/:id", case_sensitive=True).match("/USERS/7") is None


def test_host_qualified_templates() -> None:
    pattern = compile_template("http://example.com/api/:id")
    assert pattern.host_qualified
    assert pattern.param_names == ("id",)
    assert pattern.match("http://example.com/api/7") == ("7",)
    assert pattern.match("http://exampleXcom/api/7") is None
    assert not compile_template("/api/:id").host_qualified


def test_port_numbers_in_host_templates_stay_literal() -> None:
    pattern = compile_template("http://localhost:8080/:page")
    assert pattern.param_names == ("page",)
    assert pattern.match("http://localhost:8080/home") == ("home",)


def test_escaped_colon_is_literal() -> None:
    pattern = compile_template(r"/time/12\:30")
    assert pattern.param_names == ()
    assert pattern.match("/time/12:30") == ()


def test_compiling_twice_behaves_identically() -> None:
    first = compile_template("/a/:b")
    second = compile_template("/a/:b")
    assert first.source == second.source
    assert first.tokens == second.tokens


def test_matchers_compile_with_rure() -> None:
    pattern = compile_template("/users/:id")
    assert pattern.source == "(?i)^/users/([^/]+)/?$"
    assert pattern.regex.match("/USERS/12").groups() == ("12",)
    assert compile_template("/users/:id", case_sensitive=True).source == "^/users/([^/]+)/?$"


def test_literal_punctuation_matches_itself() -> None:
    pattern = compile_template("/tags/c~d&e-f #g")
    assert pattern.match("/tags/c~d&e-f #g") == ()
    assert pattern.match("/tags/cXd&e-f #g") is None


@pytest.mark.parametrize(
    "template",
    [
        "/a/:id((x))",
        "/a/(",
        "/a/)",
        "/a/()",
        "/:id/:id",
        "/a/:id([)",
        "/a/:id?",
        "/a/:id+",
        "/a/(\\d+)*",
        "/a/*",
    ],
)
def test_invalid_templates_raise(template: str) -> None:
    with pytest.raises(PatternError):
        parse_template(template)


def test_join_templates_normalizes_separators() -> None:
    assert join_templates("/users/:userId/books", "/:bookId") == "/users/:userId/books/:bookId"
    assert join_templates("/users/", "/:bookId/") == "/users/:bookId"
    assert join_templates("/", "/x") == "/x"
    assert join_templates("/api/", "/") == "/api"
    assert join_templates("api", "v1") == "/api/v1"


def test_join_templates_keeps_host_qualified_prefix() -> None:
    assert join_templates("https://api.example.com/books/", "/:bookId") == "https://api.example.com/books/:bookId"
    assert join_templates("https://api.example.com", "/") == "https://api.example.com"


def test_build_template_from_parts() -> None:
    assert build_template("/users/", param("userId")) == "/users/:userId"
    assert build_template("/files/", param("name", r"[a-z]+\.txt")) == r"/files/:name([a-z]+\.txt)"


def test_param_rejects_non_identifiers() -> None:
    with pytest.raises(PatternError):
        param("user-id")
