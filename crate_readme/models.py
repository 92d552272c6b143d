#!/usr/bin/env python3
"""
Value types produced by the README pipeline.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

LANGUAGES = ('rust', 'bash', 'toml', 'yaml', 'json', 'text')
DEFAULT_LANGUAGE = 'text'
NO_DESCRIPTION = 'No description available'


@dataclass(frozen=True)
class CodeBlock:
    """A fenced code block found inside a usage section."""
    language_tag: Optional[str]
    body: str
    offset: int


@dataclass(frozen=True)
class UsageExample:
    title: str
    code: str
    language: str = DEFAULT_LANGUAGE
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.description is None:
            del data['description']
        return data


@dataclass(frozen=True)
class ParsedReadme:
    cleaned_body: str
    description: str = NO_DESCRIPTION
    examples: List[UsageExample] = field(default_factory=list)
