#!/usr/bin/env python3
"""
Locate usage and example sections in a Markdown README.

A section starts at a header whose text is in the usage vocabulary and runs
until the next header at the same or a higher level. Deeper sub-headings
stay inside the section.
"""

import re
from typing import List

HEADER_PATTERN = re.compile(r'^#{1,6}\s')

USAGE_VOCABULARY = (
    'usage',
    'use',
    'using',
    'how to use',
    'getting started',
    'quick start',
    'example',
    'examples',
    'basic usage',
)

_vocabulary = '|'.join(re.escape(phrase) for phrase in USAGE_VOCABULARY)
USAGE_HEADER_PATTERNS = (
    re.compile(rf'^#{{1,6}}\s*(?:{_vocabulary})\s*$', re.IGNORECASE),
    re.compile(r'^usage:?\s*$', re.IGNORECASE),
    re.compile(r'^examples?:?\s*$', re.IGNORECASE),
)


def is_header(line: str) -> bool:
    return bool(HEADER_PATTERN.match(line))


def header_level(line: str) -> int:
    return len(line) - len(line.lstrip('#'))


def is_usage_header(line: str) -> bool:
    """
    True if the line names a usage section.

    Bare forms such as ``Usage:`` are accepted here, but extract_usage_sections
    only asks about lines that already look like ``#`` headers, so they never
    open a section on their own.
    """
    return any(pattern.match(line) for pattern in USAGE_HEADER_PATTERNS)


def extract_usage_sections(content: str) -> List[str]:
    """
    Return the usage sections of a README in document order.

    Each section includes its header line. Returns an empty list when no
    usage header is present.
    """
    sections: List[str] = []
    current: List[str] = []
    in_section = False
    section_level = 0

    for line in content.split('\n'):
        if is_header(line):
            level = header_level(line)
            if is_usage_header(line):
                if current:
                    sections.append('\n'.join(current))
                current = [line]
                in_section = True
                section_level = level
            elif in_section and level <= section_level:
                if current:
                    sections.append('\n'.join(current))
                current = []
                in_section = False
            elif in_section:
                current.append(line)
        elif in_section:
            current.append(line)

    if current:
        sections.append('\n'.join(current))

    return sections
