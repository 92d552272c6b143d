#!/usr/bin/env python3
"""
Language normalization and title inference for extracted code examples.
"""

from typing import Optional, Tuple

from .models import DEFAULT_LANGUAGE

LANGUAGE_ALIASES = {
    'rs': 'rust',
    'rust': 'rust',
    'sh': 'bash',
    'shell': 'bash',
    'bash': 'bash',
    'zsh': 'bash',
    'yml': 'yaml',
    'yaml': 'yaml',
    'toml': 'toml',
    'json': 'json',
}

CONFIG_TITLES = {
    'json': 'JSON Configuration',
    'toml': 'Cargo.toml Configuration',
    'yaml': 'Configuration',
}


def normalize_language(language: Optional[str]) -> str:
    """Map a fence language tag onto rust, bash, toml, yaml, json or text."""
    if not language:
        return DEFAULT_LANGUAGE
    return LANGUAGE_ALIASES.get(language.strip().lower(), DEFAULT_LANGUAGE)


def _first_line(code: str) -> str:
    for line in code.split('\n'):
        if line.strip():
            return line.strip()
    return ''


def _shell_title(first_line: str) -> str:
    if 'cargo install' in first_line or 'cargo add' in first_line:
        return 'Installation'
    if 'cargo run' in first_line or 'cargo build' in first_line:
        return 'Build and Run'
    return 'Command Line Usage'


def _rust_title(code: str, first_line: str) -> str:
    if 'use ' in first_line or 'extern crate' in code:
        return 'Basic Usage'
    if 'fn main()' in code:
        return 'Complete Example'
    if 'struct' in code or 'enum' in code:
        return 'Type Definitions'
    if 'impl' in code:
        return 'Implementation Example'
    if 'async' in code or 'await' in code:
        return 'Async Example'
    return 'Code Example'


def generate_example_title(code: str, language: str) -> str:
    """Infer a human readable title from the code and its normalized language."""
    if language == 'bash':
        return _shell_title(_first_line(code))
    if language == 'rust':
        return _rust_title(code, _first_line(code))
    return CONFIG_TITLES.get(language, 'Code Example')


def classify(code: str, language_tag: Optional[str]) -> Tuple[str, str]:
    """Return (title, normalized language) for a code block."""
    language = normalize_language(language_tag)
    return generate_example_title(code, language), language
