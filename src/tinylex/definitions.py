# Copyright 2026 TinyLex Contributors
# SPDX-License-Identifier: Apache-2.0

"""YAML token-definition files.

A definition file lists token rules in priority order::

    tokens:
      - type: number
        pattern: '(\\d+)'
      - type: space
        pattern: '(\\s+)'
        ignore: true

The declared type names become the members of a generated enumeration, in
order of first appearance.
"""

import enum
from dataclasses import dataclass
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tinylex.lexer import DefinitionError, Lexer, TokenDefinition, make_definition

# ###############
# Public Interface
# ###############


class DefinitionFileError(Exception):
    """Raised when a definition file cannot be read or is invalid."""


class DefinitionEntry(BaseModel):
    """A single token rule as written in a definition file."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(min_length=1)
    pattern: str = Field(min_length=1)
    ignore: bool = False


class DefinitionFile(BaseModel):
    """Top-level model of a definition file."""

    model_config = ConfigDict(extra="forbid")

    tokens: list[DefinitionEntry] = Field(min_length=1)


@dataclass(frozen=True)
class DefinitionSet:
    """Compiled definitions together with the enumeration of their types.

    Attributes:
        token_type: Enumeration with one member per declared type name.
        definitions: Compiled definitions in priority order.
    """

    token_type: type[enum.Enum]
    definitions: tuple[TokenDefinition[enum.Enum], ...]

    def apply(self, lexer: Lexer[enum.Enum]) -> None:
        """Register every definition on ``lexer``, preserving order."""
        for definition in self.definitions:
            lexer.define(definition.type, definition.regex.pattern, definition.ignored)


def load_definitions(path: Path) -> DefinitionSet:
    """Load and compile a token definition file.

    Args:
        path: Path to the YAML definition file.

    Returns:
        The compiled DefinitionSet.

    Raises:
        DefinitionFileError: If the file cannot be read, contains invalid
            YAML, violates the schema, or holds an unusable pattern.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise DefinitionFileError(f"Definition file not found: {path}") from None
    except OSError as exc:
        raise DefinitionFileError(f"Cannot read definition file: {exc}") from exc

    return parse_definitions(text, source_label=str(path))


def parse_definitions(text: str, source_label: str = "<string>") -> DefinitionSet:
    """Parse definition-file YAML text into a DefinitionSet.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages.

    Raises:
        DefinitionFileError: If the content is invalid.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise DefinitionFileError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise DefinitionFileError(f"{source_label}: definition file must be a YAML mapping")

    try:
        model = DefinitionFile.model_validate(data)
    except ValidationError as exc:
        raise DefinitionFileError(f"Invalid definition file {source_label}: {exc}") from exc

    return _compile(model, source_label)


# ################
# Implementation
# ################


def _compile(model: DefinitionFile, source_label: str) -> DefinitionSet:
    """Build the type enumeration and compile each entry's pattern."""
    names = list(dict.fromkeys(entry.type for entry in model.tokens))
    try:
        token_type = enum.Enum("TokenType", names)
    except (TypeError, ValueError) as exc:
        raise DefinitionFileError(f"{source_label}: invalid token type names: {exc}") from exc

    definitions: list[TokenDefinition[enum.Enum]] = []
    for index, entry in enumerate(model.tokens):
        try:
            definitions.append(make_definition(token_type[entry.type], entry.pattern, entry.ignore))
        except DefinitionError as exc:
            raise DefinitionFileError(f"{source_label}: tokens[{index}]: {exc}") from exc

    return DefinitionSet(token_type=token_type, definitions=tuple(definitions))
