import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)


class HistoryStore:
    """
    Historial de comandos aceptados, solo de anexado.

    `persisted` marca cuantas entradas ya estan escritas en el fichero de
    respaldo, para que `append_new` nunca repita lineas.
    """

    def __init__(self) -> None:
        self._entries: List[str] = []
        self.persisted = 0

    def append(self, line: str) -> None:
        if line.strip():
            self._entries.append(line)

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def numbered(self) -> List[Tuple[int, str]]:
        return list(enumerate(self._entries, 1))

    def last(self, n: int) -> List[Tuple[int, str]]:
        numbered = self.numbered()
        if n <= 0:
            return []
        return numbered[-n:]

    def load(self, path: str) -> int:
        with open(path, "r", encoding="utf-8") as f:
            lines = [line.rstrip("\n") for line in f]
        added = 0
        for line in lines:
            if line.strip():
                self._entries.append(line)
                added += 1
        logger.debug("loaded %d history entries from %s", added, path)
        return added

    def mark_persisted(self) -> None:
        self.persisted = len(self._entries)

    def flush(self, path: str) -> None:
        with open(path, "w", encoding="utf-8") as f:
            for line in self._entries:
                f.write(line + "\n")
        self.persisted = len(self._entries)
        logger.debug("wrote %d history entries to %s", len(self._entries), path)

    def append_new(self, path: str) -> int:
        pending = self._entries[self.persisted:]
        with open(path, "a", encoding="utf-8") as f:
            for line in pending:
                f.write(line + "\n")
        self.persisted = len(self._entries)
        logger.debug("appended %d history entries to %s", len(pending), path)
        return len(pending)

    def __len__(self) -> int:
        return len(self._entries)
