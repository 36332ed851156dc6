import io
import logging
import re
from typing import Any

import yaml

from ..core.ports import FrontmatterCodec, NoteCodec

logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"^\s*---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)


class YamlFrontmatter(FrontmatterCodec):
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = FRONTMATTER_RE.match(text)
        if not m:
            return {}, text
        try:
            fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        except yaml.YAMLError as e:
            # unreadable frontmatter still hides nothing from the link scan
            logger.warning("Ignoring invalid frontmatter: %s", e)
            return {}, text
        if not isinstance(fm, dict):
            fm = {}
        return fm, text[m.end() :]


class MarkdownNoteCodec(NoteCodec):
    def __init__(self, fm: YamlFrontmatter):
        self.fm = fm

    def decode_file(self, text: str, id: str) -> tuple[dict[str, Any], str]:
        return self.fm.decode(text)
