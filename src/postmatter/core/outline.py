"""Read-only structural view of a document body from markdown-it tokens"""

from collections import Counter
from typing import Any

from markdown_it import MarkdownIt

from postmatter.core.models import OutlineBlock


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def _language(info: str) -> str | None:
    """First word of a fence info string, e.g. 'rust,ignore' -> 'rust'."""
    words = info.split()
    if not words:
        return None
    return words[0].split(',')[0] or None


def outline(body: str, preset: str = 'commonmark') -> list[OutlineBlock]:
    """Return headings and code blocks of body in source order."""
    tokens = _make_parser(preset).parse(body)
    blocks: list[OutlineBlock] = []

    for i, tok in enumerate(tokens):
        line = tok.map[0] if tok.map else None
        level = heading_level(tok)
        if level is not None:
            text = tokens[i + 1].content if i + 1 < len(tokens) else ''
            blocks.append(OutlineBlock(type='heading', content=text, level=level, line=line))
        elif tok.type in ('fence', 'code_block'):
            blocks.append(OutlineBlock(
                type='code',
                content=tok.content,
                language=_language(tok.info),
                line=line,
            ))

    return blocks


def summarize(body: str, preset: str = 'commonmark') -> dict[str, Any]:
    """Word, heading and code block counts for body; code counted per language."""
    blocks = outline(body, preset)
    code = [b for b in blocks if b.type == 'code']
    return {
        "words": len(body.split()),
        "headings": sum(1 for b in blocks if b.type == 'heading'),
        "code_blocks": len(code),
        "languages": dict(Counter(b.language or 'plain' for b in code)),
    }
