# Copyright 2026 TinyLex Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for YAML token-definition files."""

from pathlib import Path

import pytest

from tinylex import DefinitionFileError, DefinitionSet, Lexer, load_definitions, parse_definitions

# ###############
# Helpers
# ###############

_BASIC = r"""
tokens:
  - type: keyword
    pattern: '(let)\b'
  - type: identifier
    pattern: '([A-Za-z_]\w*)'
  - type: number
    pattern: '(\d+)'
  - type: symbol
    pattern: '(=|;)'
  - type: comment
    pattern: '(#.*)'
    ignore: true
"""


def _write_definitions(tmp_path: Path, content: str) -> Path:
    """Write a definition file and return its path."""
    path = tmp_path / "tokens.yaml"
    path.write_text(content, encoding="utf-8")
    return path


# ###############
# Normal Cases
# ###############


def test_load_definitions(tmp_path: Path) -> None:
    """Entries become compiled definitions in file order."""
    definition_set = load_definitions(_write_definitions(tmp_path, _BASIC))

    assert isinstance(definition_set, DefinitionSet)
    names = [d.type.name for d in definition_set.definitions]
    assert names == ["keyword", "identifier", "number", "symbol", "comment"]
    assert [d.ignored for d in definition_set.definitions] == [False, False, False, False, True]


def test_type_enumeration_follows_declaration_order() -> None:
    """The generated enumeration has one member per type name."""
    definition_set = parse_definitions(_BASIC)
    assert [member.name for member in definition_set.token_type] == [
        "keyword",
        "identifier",
        "number",
        "symbol",
        "comment",
    ]


def test_repeated_type_shares_one_member() -> None:
    """Several rules may produce the same token type."""
    content = r"""
tokens:
  - type: number
    pattern: '0x([0-9a-f]+)'
  - type: number
    pattern: '(\d+)'
"""
    definition_set = parse_definitions(content)
    assert len(definition_set.token_type) == 1
    first, second = definition_set.definitions
    assert first.type is second.type


def test_definitions_drive_a_lexer() -> None:
    """A loaded definition set tokenizes text in priority order."""
    definition_set = parse_definitions(_BASIC)
    kind = definition_set.token_type
    with Lexer.from_string("let x = 42; # answer", definition_set.definitions) as lexer:
        assert lexer.consume(kind["keyword"]) == "let"
        assert lexer.consume(kind["identifier"]) == "x"
        assert lexer.consume(kind["symbol"], "=") == "="
        assert lexer.consume(kind["number"]) == "42"
        assert lexer.consume(kind["symbol"], ";") == ";"
        assert lexer.at_end


def test_apply_registers_definitions() -> None:
    """apply() defines every rule on an existing lexer."""
    definition_set = parse_definitions(_BASIC)
    lexer = Lexer.from_string("letter")
    definition_set.apply(lexer)

    assert len(lexer.definitions) == 5
    assert lexer.match(definition_set.token_type["identifier"], "letter")


def test_ignore_defaults_to_false() -> None:
    content = "tokens:\n  - type: word\n    pattern: '(\\w+)'\n"
    definition_set = parse_definitions(content)
    assert definition_set.definitions[0].ignored is False


# ###############
# Error Cases
# ###############


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(DefinitionFileError, match="not found"):
        load_definitions(tmp_path / "missing.yaml")


def test_invalid_yaml_raises() -> None:
    with pytest.raises(DefinitionFileError, match="Invalid YAML"):
        parse_definitions("tokens: [unclosed")


def test_non_mapping_raises() -> None:
    with pytest.raises(DefinitionFileError, match="must be a YAML mapping"):
        parse_definitions("- just\n- a list\n")


def test_empty_file_raises() -> None:
    with pytest.raises(DefinitionFileError, match="must be a YAML mapping"):
        parse_definitions("")


def test_empty_token_list_raises() -> None:
    with pytest.raises(DefinitionFileError, match="Invalid definition file"):
        parse_definitions("tokens: []\n")


def test_unknown_field_raises() -> None:
    content = "tokens:\n  - type: word\n    pattern: '(\\w+)'\n    priority: 3\n"
    with pytest.raises(DefinitionFileError, match="Invalid definition file"):
        parse_definitions(content)


def test_missing_pattern_raises() -> None:
    with pytest.raises(DefinitionFileError, match="Invalid definition file"):
        parse_definitions("tokens:\n  - type: word\n")


def test_pattern_without_group_raises() -> None:
    content = "tokens:\n  - type: word\n    pattern: '(\\w+)'\n  - type: number\n    pattern: '\\d+'\n"
    with pytest.raises(DefinitionFileError, match=r"tokens\[1\].*no capturing group"):
        parse_definitions(content, source_label="defs.yaml")


def test_invalid_regex_raises() -> None:
    content = "tokens:\n  - type: word\n    pattern: '(\\w+'\n"
    with pytest.raises(DefinitionFileError, match="Invalid pattern"):
        parse_definitions(content)


def test_invalid_type_name_raises() -> None:
    content = "tokens:\n  - type: _sunder_\n    pattern: '(\\w+)'\n"
    with pytest.raises(DefinitionFileError, match="invalid token type names"):
        parse_definitions(content)


def test_error_mentions_source_label(tmp_path: Path) -> None:
    path = _write_definitions(tmp_path, "tokens: 3\n")
    with pytest.raises(DefinitionFileError, match="tokens.yaml"):
        load_definitions(path)
