"""Path template compilation.

A template is literal text interleaved with parameter slots:

* ``:name`` binds one path segment to ``name``
* ``:name(<regex>)`` binds ``name`` using a custom expression
* ``(<regex>)`` is an unnamed slot, exposed under its position (``"0"``, ``"1"``, ...)

Templates starting with ``http`` are host-qualified and match against the full
URL; every other template matches against the path only.

Optional, repeated and wildcard modifiers (``:id?``, ``:id+``, ``*``) are not
supported and raise :class:`~shallot.exceptions.PatternError`; write the
expression out instead, e.g. ``(.*)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

import rure
from rure.regex import RegexObject

from .exceptions import PatternError

DEFAULT_SEGMENT_PATTERN = r"[^/]+"

_NAME_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_MODIFIERS = frozenset("?+*")
_META_CHARACTERS = frozenset("\\.+*?()|[]{}^$")


@dataclass(frozen=True, slots=True)
class Literal:
    """Literal template text. Never produces a capture."""

    text: str


@dataclass(frozen=True, slots=True)
class Param:
    """Named parameter slot."""

    name: str
    pattern: str = DEFAULT_SEGMENT_PATTERN

    def __str__(self) -> str:
        if self.pattern == DEFAULT_SEGMENT_PATTERN:
            return f":{self.name}"
        if self.name.isdigit():
            return f"({self.pattern})"
        return f":{self.name}({self.pattern})"


Token = Union[Literal, Param]


def param(name: str, pattern: str = DEFAULT_SEGMENT_PATTERN) -> Param:
    """Return a parameter slot for building templates from parts."""

    if not _NAME_PATTERN.fullmatch(name):
        raise PatternError(f":{name}", "parameter names must be identifiers")
    return Param(name, pattern)


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    template: str
    source: str
    regex: RegexObject
    tokens: tuple[Token, ...]
    host_qualified: bool

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(token.name for token in self.tokens if isinstance(token, Param))

    def match(self, target: str) -> tuple[str, ...] | None:
        """Return the ordered captures when ``target`` matches, else ``None``."""

        found = self.regex.match(target)
        if found is None:
            return None
        return tuple(found.groups())


def normalize_template(template: str) -> str:
    """Strip a trailing separator so ``/a`` and ``/a/`` register identically."""

    if len(template) > 1 and template.endswith("/"):
        return template.rstrip("/") or "/"
    return template


def parse_template(template: str) -> tuple[Token, ...]:
    """Split ``template`` into literal and parameter tokens."""

    source = normalize_template(template)
    tokens: list[Token] = []
    literal: list[str] = []
    names: set[str] = set()
    unnamed = 0
    position = 0

    def flush() -> None:
        if literal:
            tokens.append(Literal("".join(literal)))
            literal.clear()

    while position < len(source):
        char = source[position]
        if char == "\\" and position + 1 < len(source):
            literal.append(source[position + 1])
            position += 2
            continue
        if char == ":":
            found = _NAME_PATTERN.match(source, position + 1)
            if found is None:
                # a colon not followed by a name is literal, e.g. "http://"
                literal.append(char)
                position += 1
                continue
            name = found.group(0)
            position = found.end()
            pattern = DEFAULT_SEGMENT_PATTERN
            if position < len(source) and source[position] == "(":
                pattern, position = _read_group(template, source, position)
            if name in names:
                raise PatternError(template, f"duplicate parameter {name!r}")
            _reject_modifier(template, source, position)
            names.add(name)
            flush()
            tokens.append(Param(name, pattern))
            continue
        if char == "(":
            pattern, position = _read_group(template, source, position)
            _reject_modifier(template, source, position)
            name = str(unnamed)
            unnamed += 1
            flush()
            tokens.append(Param(name, pattern))
            continue
        if char == ")":
            raise PatternError(template, f"unbalanced ')' at offset {position}")
        if char == "*":
            raise PatternError(template, "wildcard '*' is not supported; use '(.*)'")
        literal.append(char)
        position += 1
    flush()
    return tuple(tokens)


def _read_group(template: str, source: str, start: int) -> tuple[str, int]:
    depth = 0
    position = start
    while position < len(source):
        char = source[position]
        if char == "\\":
            position += 2
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                expression = source[start + 1 : position]
                if not expression:
                    raise PatternError(template, "empty parameter expression")
                try:
                    compiled = re.compile(expression)
                except re.error as exc:
                    raise PatternError(template, f"bad expression {expression!r}: {exc}") from exc
                if compiled.groups:
                    raise PatternError(template, f"capturing group inside {expression!r}; use (?:...)")
                return expression, position + 1
        position += 1
    raise PatternError(template, "unbalanced '('")


def _reject_modifier(template: str, source: str, position: int) -> None:
    if position < len(source) and source[position] in _MODIFIERS:
        raise PatternError(template, f"parameter modifier {source[position]!r} is not supported")


def _escape(text: str) -> str:
    return "".join(f"\\{char}" if char in _META_CHARACTERS else char for char in text)


@lru_cache(maxsize=1024)
def compile_template(template: str, *, case_sensitive: bool = False) -> CompiledPattern:
    """Compile ``template`` into a :class:`CompiledPattern`."""

    tokens = parse_template(template)
    parts: list[str] = []
    for token in tokens:
        if isinstance(token, Literal):
            parts.append(_escape(token.text))
        else:
            parts.append(f"({token.pattern})")
    body = "".join(parts)
    if body.endswith("/"):
        body = body[:-1]
    source = ("" if case_sensitive else "(?i)") + f"^{body}/?$"
    try:
        regex = rure.compile(source)
    except Exception as exc:
        raise PatternError(template, f"cannot compile {source!r}: {exc}") from exc
    return CompiledPattern(
        template=template,
        source=source,
        regex=regex,
        tokens=tokens,
        host_qualified=template.startswith("http"),
    )


def join_templates(prefix: str, template: str) -> str:
    """Join a mount ``prefix`` and a child ``template`` with a single separator.

    A host-qualified prefix keeps its scheme and host so the joined template
    still matches against the full URL.
    """

    head = prefix.strip("/")
    tail = template.strip("/")
    joined = "/".join(part for part in (head, tail) if part)
    if prefix.startswith("http"):
        return joined
    return "/" + joined


def build_template(*parts: str | Param) -> str:
    """Assemble a template from literal strings and :func:`param` slots."""

    return "".join(str(part) for part in parts)


__all__ = [
    "DEFAULT_SEGMENT_PATTERN",
    "CompiledPattern",
    "Literal",
    "Param",
    "Token",
    "build_template",
    "compile_template",
    "join_templates",
    "normalize_template",
    "param",
    "parse_template",
]
