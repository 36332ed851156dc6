from pathlib import Path
from typing import Iterable
from ..core.ports import StorageStrategy


class FsStorage(StorageStrategy):
    def __init__(self, root: Path):
        self.root = root

    def _path(self, id: str) -> Path:
        return self.root / f"{id}.md"

    def read_raw(self, id: str) -> str | None:
        p = self._path(id)
        if not p.exists():
            return None
        # newline="" keeps "\r\n" intact so edit ranges match the file on disk
        with open(p, encoding="utf-8", newline="") as f:
            return f.read()

    def write_raw(self, id: str, contents: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(id)
        tmp_path = path.with_suffix(".md.tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8", newline="") as f:
                f.write(contents)
            tmp_path.replace(path)
        except Exception:
            if tmp_path.exists():
                tmp_path.unlink()
            raise

    def list_all_ids(self) -> Iterable[str]:
        if not self.root.exists():
            return []
        return sorted(p.stem for p in self.root.glob("*.md"))
