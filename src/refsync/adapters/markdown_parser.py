import re

from ..core.model import Heading, Link, NoteBody, NoteId, Range
from ..core.ports import ParserStrategy

LINK_RE = re.compile(r"\[\[(.*?)\]\]")
HEADING_RE = re.compile(r"^ {0,3}(#{1,6})\s+(.+?)(?:\s+#+)?\s*$")
FENCE_RE = re.compile(r"^\s{0,3}(`{3,}|~{3,})")
INLINE_CODE_RE = re.compile(r"(`+)(.+?)\1")


def _target_id(label: str) -> NoteId:
    # [[id|Alias]], [[id#Heading]] and [[id#^block]] all point at id
    return label.split("|", 1)[0].split("#", 1)[0].strip()


def _mask_inline_code(line: str) -> str:
    # same length, so match offsets still index the original line
    return INLINE_CODE_RE.sub(lambda m: " " * len(m.group(0)), line)


class MarkdownParser(ParserStrategy):
    """Line scanner for ATX headings and wiki links; code is skipped."""

    def parse(self, text: str, id: str) -> NoteBody:
        body = NoteBody(raw=text)
        offset = 0
        fence: str | None = None

        for ln in text.splitlines(keepends=True):
            line = ln.rstrip("\r\n")

            fence_match = FENCE_RE.match(line)
            if fence_match:
                marker = fence_match.group(1)
                if fence is None:
                    fence = marker
                elif marker[0] == fence[0] and len(marker) >= len(fence):
                    fence = None
                offset += len(ln)
                continue
            if fence is not None:
                offset += len(ln)
                continue

            heading_match = HEADING_RE.match(line)
            if heading_match:
                body.headings.append(
                    Heading(
                        level=len(heading_match.group(1)),
                        text=heading_match.group(2).strip(),
                        range=Range(offset, offset + len(line)),
                    )
                )

            for m in LINK_RE.finditer(_mask_inline_code(line)):
                label = m.group(1).strip()
                if not label:
                    continue
                target = _target_id(label)
                if not target:
                    continue
                body.links.append(
                    Link(
                        source=id,
                        target=target,
                        label=label,
                        range=Range(offset + m.start(), offset + m.end()),
                    )
                )

            offset += len(ln)

        return body
