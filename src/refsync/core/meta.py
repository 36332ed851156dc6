from collections.abc import Iterator, Mapping
from typing import Any

TITLE_KEYS = ("core/title", "title")


class MetaBag(Mapping[str, Any]):
    """
    Read-only view of a note's frontmatter. refsync only looks at the title:
    "core/title" wins over a plain "title"; anything else is carried along.
    """

    def __init__(self, initial: dict | None = None):
        self._d = dict(initial or {})

    def __getitem__(self, k: str) -> Any:
        return self._d[k]

    def __iter__(self) -> Iterator[str]:
        return iter(self._d)

    def __len__(self) -> int:
        return len(self._d)

    def title(self) -> str | None:
        for key in TITLE_KEYS:
            value = self._d.get(key)
            # YAML may give numbers or dates; those are not titles
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None
