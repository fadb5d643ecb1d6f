# Copyright 2026 TinyLex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Regex-driven, line-oriented lexer with one token of lookahead."""

from tinylex.definitions import DefinitionFileError, DefinitionSet, load_definitions, parse_definitions
from tinylex.lexer import (
    END_OF_INPUT,
    DefinitionError,
    EndOfInput,
    Lexer,
    LexerError,
    LexerState,
    LexerSyntaxError,
    Lookahead,
    SourcePosition,
    Token,
    TokenDefinition,
    UnexpectedTokenError,
    make_definition,
    tokenize,
)

__all__ = [
    "END_OF_INPUT",
    "DefinitionError",
    "DefinitionFileError",
    "DefinitionSet",
    "EndOfInput",
    "Lexer",
    "LexerError",
    "LexerState",
    "LexerSyntaxError",
    "Lookahead",
    "SourcePosition",
    "Token",
    "TokenDefinition",
    "UnexpectedTokenError",
    "load_definitions",
    "make_definition",
    "parse_definitions",
    "tokenize",
]
