# Copyright (c) 2023 - 2025, HaiyangLi <quantocean.li at gmail dot com>
#
# SPDX-License-Identifier: Apache-2.0

"""Declared parameter names of a callable."""

from __future__ import annotations

import inspect
import io
import logging
import textwrap
import tokenize
from collections.abc import Callable, Iterator
from typing import Any

from ._errors import DeclarationError

__all__ = ("argument_names", "parse_argument_names")

logger = logging.getLogger(__name__)

_OPEN = {"(": ")", "[": "]", "{": "}"}
_SKIP = frozenset(
    {
        tokenize.COMMENT,
        tokenize.NL,
        tokenize.NEWLINE,
        tokenize.INDENT,
        tokenize.DEDENT,
    }
)


def argument_names(func: Callable[..., Any]) -> list[str]:
    """Return the parameter names ``func`` was declared with, in order.

    Wrappers (anything exposing ``__wrapped__``, including every ``Fn``)
    are unwrapped first, so the names are those of the original definition.
    Parameter metadata comes from :func:`inspect.signature`; callables it
    cannot describe fall back to parsing their source text.

    Raises:
        DeclarationError: neither a signature nor a parseable source is
            available.
    """
    target = inspect.unwrap(func)
    try:
        signature = inspect.signature(target, follow_wrapped=False)
    except (TypeError, ValueError) as exc:
        logger.debug("No signature for %r (%s); reading source", target, exc)
        return parse_argument_names(_declaration_text(target))
    return list(signature.parameters)


def _declaration_text(func: Callable[..., Any]) -> str:
    try:
        return inspect.getsource(func)
    except (OSError, TypeError) as exc:
        raise DeclarationError(
            f"No declaration available for {func!r}",
            details={"func": repr(func)},
            cause=exc,
        ) from exc


def parse_argument_names(text: str) -> list[str]:
    """Extract parameter names from a ``def`` or ``lambda`` declaration.

    Comments between parameters, annotations and default values are
    dropped; ``*args``/``**kwargs`` keep their bare names and the ``*`` and
    ``/`` markers are skipped. Decorator lines before a ``def`` are allowed.

    >>> parse_argument_names("def f(a, b=1, *rest, key: int = 2): ...")
    ['a', 'b', 'rest', 'key']
    >>> parse_argument_names("lambda: None")
    []

    Raises:
        DeclarationError: ``text`` does not contain a declaration.
    """
    try:
        tokens = [
            tok
            for tok in _tokens(textwrap.dedent(text))
            if tok.type not in _SKIP
        ]
    except (tokenize.TokenError, IndentationError, SyntaxError) as exc:
        raise DeclarationError.from_text(
            text, message="Malformed declaration", cause=exc
        ) from exc

    params = _parameter_tokens(tokens)
    if params is None:
        raise DeclarationError.from_text(
            text, message="Text is not a def or lambda declaration"
        )

    names = []
    for segment in _split_top_level(params):
        if name := _segment_name(segment):
            names.append(name)
    return names


def _tokens(text: str) -> Iterator[tokenize.TokenInfo]:
    readline = io.StringIO(text).readline
    for tok in tokenize.generate_tokens(readline):
        if tok.type == tokenize.ENDMARKER:
            return
        yield tok


def _parameter_tokens(
    tokens: list[tokenize.TokenInfo],
) -> list[tokenize.TokenInfo] | None:
    """Tokens between a declaration's delimiters, or None if there is none."""
    for i, tok in enumerate(tokens):
        if tok.type != tokenize.NAME:
            continue
        if (
            tok.string == "def"
            and i + 2 < len(tokens)
            and tokens[i + 1].type == tokenize.NAME
            and tokens[i + 2].string == "("
        ):
            return _until_close(tokens, i + 3, ")")
        if tok.string == "lambda":
            return _until_close(tokens, i + 1, ":")
    return None


def _until_close(
    tokens: list[tokenize.TokenInfo], start: int, closer: str
) -> list[tokenize.TokenInfo] | None:
    stack: list[str] = []
    for j in range(start, len(tokens)):
        s = tokens[j].string
        if tokens[j].type != tokenize.OP:
            continue
        if not stack and s == closer:
            return tokens[start:j]
        if s in _OPEN:
            stack.append(_OPEN[s])
        elif stack and s == stack[-1]:
            stack.pop()
    return None


def _split_top_level(
    tokens: list[tokenize.TokenInfo],
) -> Iterator[list[tokenize.TokenInfo]]:
    depth = 0
    segment: list[tokenize.TokenInfo] = []
    for tok in tokens:
        if tok.type == tokenize.OP:
            if tok.string in _OPEN:
                depth += 1
            elif tok.string in (")", "]", "}"):
                depth -= 1
            elif tok.string == "," and depth == 0:
                yield segment
                segment = []
                continue
        segment.append(tok)
    yield segment


def _segment_name(segment: list[tokenize.TokenInfo]) -> str | None:
    # "*", "**" or "/" may lead; the first NAME after them is the parameter
    for tok in segment:
        if tok.type == tokenize.NAME:
            return tok.string
        if tok.string not in ("*", "**", "/"):
            return None
    return None
