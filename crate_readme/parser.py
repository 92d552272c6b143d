#!/usr/bin/env python3
"""
README parsing for Rust crates.

Turns a raw README into a cleaned body, a short description and a bounded
list of classified usage examples. Everything here is best effort: parsing
problems are logged and replaced by safe defaults instead of failing the
request that asked for the README.
"""

import logging
import re
from typing import List

from .code_blocks import extract_section_examples
from .models import NO_DESCRIPTION, ParsedReadme, UsageExample
from .sections import extract_usage_sections

logger = logging.getLogger(__name__)

MAX_EXAMPLES = 10

IMAGE_PATTERN = re.compile(r'!\[([^\]]*)\]\([^)]+\)')
RELATIVE_LINK_PATTERN = re.compile(r'\[([^\]]+)\]\((?!https?://)([^)]+)\)')
EXCESS_NEWLINES_PATTERN = re.compile(r'\n{3,}')
WHITESPACE_PATTERN = re.compile(r'\s+')

MIN_DESCRIPTION_LENGTH = 20
MAX_DESCRIPTION_LENGTH = 300


def _image_alt(match: "re.Match") -> str:
    alt = match.group(1)
    return alt if len(alt) > 3 else ''


class ReadmeParser:
    """Stateless README parser; every method is a pure function of its input."""

    @staticmethod
    def parse(content: str, include_examples: bool = True) -> ParsedReadme:
        """Run the whole pipeline over a raw README."""
        return ParsedReadme(
            cleaned_body=ReadmeParser.clean_markdown(content),
            description=ReadmeParser.extract_description(content),
            examples=ReadmeParser.parse_usage_examples(content, include_examples),
        )

    @staticmethod
    def parse_usage_examples(content: str, include_examples: bool = True) -> List[UsageExample]:
        """
        Extract usage examples from the README's usage sections.

        Args:
            content: Raw (unsanitized) README text
            include_examples: When False, nothing is extracted

        Returns:
            At most MAX_EXAMPLES examples in document order, deduplicated by code
        """
        if not include_examples or not content:
            return []

        try:
            examples: List[UsageExample] = []
            for section in extract_usage_sections(content):
                examples.extend(extract_section_examples(section))

            limited = ReadmeParser.deduplicate_examples(examples)[:MAX_EXAMPLES]
            logger.debug(
                "Extracted usage examples from README",
                extra={'extra_data': {'candidates': len(examples), 'kept': len(limited)}}
            )
            return limited
        except Exception:
            logger.warning("Failed to parse usage examples from README", exc_info=True)
            return []

    @staticmethod
    def deduplicate_examples(examples: List[UsageExample]) -> List[UsageExample]:
        """Keep the first example for each whitespace-normalized code body."""
        seen = set()
        unique = []
        for example in examples:
            key = WHITESPACE_PATTERN.sub(' ', example.code).strip()
            if key in seen:
                continue
            seen.add(key)
            unique.append(example)
        return unique

    @staticmethod
    def clean_markdown(content: str) -> str:
        """
        Strip badges and relative links and tidy whitespace.

        Images keep their alt text when it is longer than three characters.
        Links to relative paths are reduced to their text; absolute http(s)
        links are left alone.
        """
        try:
            cleaned = content
            # A rewrite can expose a new image or link (badges wrapped in
            # links), so repeat until nothing changes.
            while True:
                rewritten = IMAGE_PATTERN.sub(_image_alt, cleaned)
                rewritten = RELATIVE_LINK_PATTERN.sub(r'\1', rewritten)
                if rewritten == cleaned:
                    break
                cleaned = rewritten

            cleaned = EXCESS_NEWLINES_PATTERN.sub('\n\n', cleaned)
            return cleaned.strip()
        except Exception:
            logger.warning("Failed to clean markdown content", exc_info=True)
            return content

    @staticmethod
    def extract_description(content: str) -> str:
        """
        Return the first substantial prose paragraph of the README.

        Headers, blank lines and badge lines are skipped until a line of at
        least MIN_DESCRIPTION_LENGTH characters is found. Following lines of
        the same paragraph are joined on while the result stays under
        MAX_DESCRIPTION_LENGTH.
        """
        try:
            description = ''
            for line in content.split('\n'):
                trimmed = line.strip()

                if not trimmed or trimmed.startswith('#'):
                    if description:
                        break
                    continue

                if trimmed.startswith('![') or trimmed.startswith('[!['):
                    continue

                if not description:
                    if len(trimmed) >= MIN_DESCRIPTION_LENGTH:
                        description = trimmed
                        if len(description) > MAX_DESCRIPTION_LENGTH:
                            description = description[:MAX_DESCRIPTION_LENGTH - 3].rstrip() + '...'
                            break
                    continue

                if len(description) + len(trimmed) < MAX_DESCRIPTION_LENGTH:
                    description += ' ' + trimmed
                else:
                    break

            return description or NO_DESCRIPTION
        except Exception:
            logger.warning("Failed to extract description from README", exc_info=True)
            return NO_DESCRIPTION
