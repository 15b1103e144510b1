import logging
import os
import stat
from collections import OrderedDict
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def current_path() -> str:
    return os.environ.get("PATH", "")


def split_path(path_value: str) -> List[str]:
    return [d for d in path_value.split(os.pathsep) if d]


def is_executable(path: str) -> bool:
    try:
        st = os.stat(path)
    except OSError:
        return False
    return not stat.S_ISDIR(st.st_mode) and bool(st.st_mode & EXEC_BITS)


def find_in_path(name: str, path_value: str) -> Optional[str]:
    for directory in split_path(path_value):
        candidate = os.path.join(directory, name)
        if is_executable(candidate):
            return candidate
    return None


class SearchPathCache:
    """
    Cache de los ejecutables encontrados en los directorios del PATH.

    La clave es el valor completo de PATH: si cambia, se reconstruye el
    indice. Solo guarda unas pocas entradas.
    """

    def __init__(self, maxsize: int = 4) -> None:
        self.maxsize = maxsize
        self._entries: "OrderedDict[str, Dict[str, str]]" = OrderedDict()

    def executables(self, path_value: Optional[str] = None) -> Dict[str, str]:
        if path_value is None:
            path_value = current_path()

        index = self._entries.get(path_value)
        if index is not None:
            self._entries.move_to_end(path_value)
            return index

        index = self._scan(path_value)
        self._entries[path_value] = index
        while len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)
        return index

    def _scan(self, path_value: str) -> Dict[str, str]:
        index: Dict[str, str] = {}
        for directory in split_path(path_value):
            try:
                names = os.listdir(directory)
            except OSError:
                continue
            for name in names:
                # el primer directorio gana, igual que en la busqueda
                if name in index:
                    continue
                full = os.path.join(directory, name)
                if is_executable(full):
                    index[name] = full
        logger.debug("indexed %d executables for PATH=%r", len(index), path_value)
        return index

    def __len__(self) -> int:
        return len(self._entries)
