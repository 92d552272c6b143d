#!/usr/bin/env python3
"""
Fenced code block extraction for usage sections.

Besides the code itself, each block gets an optional description recovered
from the prose line just above it.
"""

import re
from typing import List, Optional

from .classifier import classify
from .models import CodeBlock, UsageExample

# Anything after the tag on the fence line (e.g. ```rust,no_run) is ignored
CODE_BLOCK_PATTERN = re.compile(r'```([\w+-]+)?[^\n]*\n(.*?)```', re.DOTALL)

BULLET_PATTERN = re.compile(r'^[*-]\s+')

MIN_DESCRIPTION_LENGTH = 10
MAX_DESCRIPTION_LENGTH = 200

CODE_INDICATORS = (
    re.compile(r'^[{}\[\]();,]'),
    re.compile(r'[{}\[\]();,]$'),
    re.compile(r'^(?:use|fn|struct|enum|impl|mod|let|const|pub|extern)\s'),
    re.compile(r'^\$'),
    re.compile(r'^//'),
    re.compile(r'^#'),
    re.compile(r'^\['),
)


def looks_like_code(line: str) -> bool:
    """Heuristic: does this single line read like source code rather than prose?"""
    text = line.strip()
    return any(pattern.search(text) for pattern in CODE_INDICATORS)


def find_code_blocks(section: str) -> List[CodeBlock]:
    """Fenced blocks in the section, skipping those with an empty body."""
    blocks = []
    for match in CODE_BLOCK_PATTERN.finditer(section):
        body = match.group(2).strip()
        if not body:
            continue
        blocks.append(CodeBlock(language_tag=match.group(1), body=body, offset=match.start()))
    return blocks


def extract_block_description(section: str, offset: int) -> Optional[str]:
    """
    Walk backwards from a code block to the nearest prose line.

    Blank lines and ``#`` lines are skipped. The first other line is used if
    it is a sensible length and does not look like code; otherwise the block
    has no description.
    """
    for line in reversed(section[:offset].split('\n')):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith('#'):
            continue

        if MIN_DESCRIPTION_LENGTH < len(trimmed) < MAX_DESCRIPTION_LENGTH and not looks_like_code(trimmed):
            return BULLET_PATTERN.sub('', trimmed)
        return None

    return None


def extract_section_examples(section: str) -> List[UsageExample]:
    examples = []
    for block in find_code_blocks(section):
        title, language = classify(block.body, block.language_tag)
        examples.append(UsageExample(
            title=title,
            description=extract_block_description(section, block.offset),
            code=block.body,
            language=language,
        ))
    return examples
