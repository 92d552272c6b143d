#!/usr/bin/env python3
"""
Convert rendered README HTML back into Markdown.

crates.io serves READMEs already rendered to HTML. The README pipeline works
on Markdown (headers, fenced code), so the HTML is mapped back onto the
Markdown constructs it came from.
"""

import re
from typing import List

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

BLOCK_TAGS = ['h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'p', 'pre', 'ul', 'ol', 'blockquote']
# Blocks nested in these are rendered by their container
CONTAINER_TAGS = ['pre', 'ul', 'ol', 'blockquote']

HTML_CLOSING_TAG = re.compile(r'</(?:p|h[1-6]|div|pre|ul|ol|table|article|section)>', re.IGNORECASE)
MARKDOWN_BLOCK = re.compile(r'^(?:#{1,6}\s|```)', re.MULTILINE)
MARKDOWN_INLINE = re.compile(r'\]\([^)\s]+\)|\*\*[^*\n]+\*\*|\[[^\]\n]+\]\[[^\]\n]*\]')


def looks_like_html(text: str) -> bool:
    """True for rendered HTML, False for Markdown (even Markdown with inline HTML)."""
    stripped = text.lstrip()
    return (
        stripped.startswith('<')
        and bool(HTML_CLOSING_TAG.search(stripped))
        and not MARKDOWN_BLOCK.search(stripped)
        and not MARKDOWN_INLINE.search(stripped)
    )


def _inline(node) -> str:
    if isinstance(node, Comment):
        return ''
    if isinstance(node, NavigableString):
        return str(node)
    if not isinstance(node, Tag):
        return ''

    if node.name == 'img':
        alt = node.get('alt', '')
        src = node.get('src')
        return f"![{alt}]({src})" if src else alt

    inner = ''.join(_inline(child) for child in node.children)

    if node.name == 'a':
        href = node.get('href')
        if href and inner.strip():
            return f"[{inner.strip()}]({href})"
        return inner
    if node.name == 'code':
        return f"`{node.get_text()}`"
    if node.name in ('strong', 'b'):
        return f"**{inner}**"
    if node.name in ('em', 'i'):
        return f"*{inner}*"
    if node.name == 'br':
        return '\n'
    return inner


def _code_language(pre: Tag) -> str:
    for tag in (pre.find('code'), pre):
        if tag is None:
            continue
        for css_class in tag.get('class') or []:
            if css_class.startswith('language-'):
                return css_class[len('language-'):]
    return ''


def _list_lines(element: Tag, depth: int = 0) -> List[str]:
    lines = []
    ordered = element.name == 'ol'
    for index, li in enumerate(element.find_all('li', recursive=False), start=1):
        marker = f"{index}." if ordered else '-'
        text = ''.join(
            _inline(child) for child in li.children
            if not (isinstance(child, Tag) and child.name in ('ul', 'ol'))
        )
        lines.append(f"{'  ' * depth}{marker} {' '.join(text.split())}")
        for sublist in li.find_all(['ul', 'ol'], recursive=False):
            lines.extend(_list_lines(sublist, depth + 1))
    return lines


def html_to_markdown(html: str) -> str:
    """
    Render README HTML as Markdown.

    Args:
        html: HTML fragment or document

    Returns:
        Markdown text with one blank line between blocks
    """
    soup = BeautifulSoup(html, 'html.parser')
    markdown_parts = []

    for element in soup.find_all(BLOCK_TAGS):
        if element.find_parent(CONTAINER_TAGS):
            continue

        if element.name.startswith('h'):
            level = int(element.name[1])
            markdown_parts.append(f"{'#' * level} {element.get_text(strip=True)}")

        elif element.name == 'p':
            text = ''.join(_inline(child) for child in element.children).strip()
            if text:
                markdown_parts.append(text)

        elif element.name == 'pre':
            code = element.find('code') or element
            body = code.get_text().rstrip('\n')
            markdown_parts.append(f"```{_code_language(element)}\n{body}\n```")

        elif element.name in ('ul', 'ol'):
            lines = _list_lines(element)
            if lines:
                markdown_parts.append('\n'.join(lines))

        elif element.name == 'blockquote':
            text = element.get_text('\n', strip=True)
            if text:
                markdown_parts.append('\n'.join(f"> {line}" for line in text.split('\n')))

    return '\n\n'.join(markdown_parts)
