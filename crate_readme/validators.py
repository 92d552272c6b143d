#!/usr/bin/env python3
"""
Validation of tool arguments.

All validators raise ValidationError and return nothing on success.
"""

import re
from typing import Optional

from .errors import ValidationError

CRATE_NAME_PATTERN = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_-]{0,63}$')
RESERVED_NAMES = ('rust', 'cargo', 'std', 'core', 'alloc', 'proc_macro', 'test')

SEMVER_PATTERN = re.compile(
    r'^(\d+)\.(\d+)\.(\d+)'
    r'(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?'
    r'(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$'
)

MAX_QUERY_LENGTH = 100
MAX_LIMIT = 100

DANGEROUS_QUERY_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (r'<script', r'javascript:', r'data:', r'vbscript:', r'<iframe', r'<object', r'<embed')
]

CONTROL_CHARS = re.compile(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]')


def validate_package_name(package_name: str) -> None:
    if not package_name or not isinstance(package_name, str):
        raise ValidationError('Package name is required and must be a string', 'INVALID_PACKAGE_NAME')

    if not CRATE_NAME_PATTERN.match(package_name):
        raise ValidationError(
            'Invalid crate name. Crate names must start with a letter or underscore, contain only '
            'letters, numbers, hyphens, and underscores, and be at most 64 characters long.',
            'INVALID_PACKAGE_NAME',
            {'package_name': package_name, 'pattern': CRATE_NAME_PATTERN.pattern}
        )

    if package_name.lower() in RESERVED_NAMES:
        raise ValidationError(
            f"Package name '{package_name}' is reserved and cannot be used",
            'INVALID_PACKAGE_NAME',
            {'package_name': package_name}
        )


def validate_version(version: str) -> None:
    if not version or not isinstance(version, str):
        raise ValidationError('Version must be a string', 'INVALID_VERSION')

    if version == 'latest':
        return

    if not SEMVER_PATTERN.match(version):
        raise ValidationError(
            f"Invalid version format: {version}. Expected semantic version "
            "(e.g., 1.0.0, 1.0.0-alpha, etc.) or 'latest'",
            'INVALID_VERSION',
            {'version': version}
        )


def validate_search_query(query: str) -> None:
    if not query or not isinstance(query, str):
        raise ValidationError('Search query is required and must be a string', 'INVALID_SEARCH_QUERY')

    if not query.strip():
        raise ValidationError('Search query cannot be empty', 'INVALID_SEARCH_QUERY')

    if len(query) > MAX_QUERY_LENGTH:
        raise ValidationError(
            f'Search query is too long (maximum {MAX_QUERY_LENGTH} characters)',
            'INVALID_SEARCH_QUERY',
            {'max_length': MAX_QUERY_LENGTH}
        )

    for pattern in DANGEROUS_QUERY_PATTERNS:
        if pattern.search(query):
            raise ValidationError(
                'Search query contains potentially unsafe content',
                'INVALID_SEARCH_QUERY',
                {'query': '[REDACTED]'}
            )


def validate_limit(limit: int) -> None:
    # bool is an int subclass, but True is not a sensible page size
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise ValidationError('Limit must be an integer', 'INVALID_LIMIT')

    if limit < 1:
        raise ValidationError('Limit must be a positive integer', 'INVALID_LIMIT', {'limit': limit})

    if limit > MAX_LIMIT:
        raise ValidationError(f'Limit cannot exceed {MAX_LIMIT}', 'INVALID_LIMIT', {'limit': limit})


def validate_score_threshold(value: Optional[float], name: str) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 1:
        raise ValidationError(f'{name.capitalize()} score must be between 0 and 1', 'INVALID_SCORE', {name: value})


def sanitize_input(text: str) -> str:
    """Remove control characters except tab, newline and carriage return."""
    if not isinstance(text, str):
        return ''
    return CONTROL_CHARS.sub('', text)
