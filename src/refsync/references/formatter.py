"""Rendering of the autogenerated reference block."""

import re
from collections.abc import Sequence

from ..core.model import LinkTarget, ReferenceBlock

LABEL_ESCAPE_RE = re.compile(r"([\\\[\]])")
TITLE_ESCAPE_RE = re.compile(r'([\\"])')
LINE_BREAK_RE = re.compile(r"\s*[\r\n]+\s*")


def escape_label(label: str) -> str:
    return LABEL_ESCAPE_RE.sub(r"\\\1", LINE_BREAK_RE.sub(" ", label))


def escape_title(title: str) -> str:
    # an entry is exactly one line, so multi-line titles are folded
    return TITLE_ESCAPE_RE.sub(r"\\\1", LINE_BREAK_RE.sub(" ", title))


def format_entry(target: LinkTarget) -> str:
    label = escape_label(target.display_slug)
    title = escape_title(target.title)
    return f'[{label}]: {target.target_reference} "{title}"'


def render_block(block: ReferenceBlock, eol: str) -> str:
    if not block.entries:
        return ""
    lines = [block.begin_marker]
    lines.extend(format_entry(t) for t in block.entries)
    lines.append(block.end_marker)
    return eol.join(lines)


def format_block(targets: Sequence[LinkTarget], eol: str) -> str:
    """
    Canonical block text for ``targets`` joined with ``eol``, without a
    trailing ``eol``. No targets means no block, i.e. ``""``.
    """
    return render_block(ReferenceBlock(entries=tuple(targets)), eol)
