import logging
import os
from typing import Optional, Union

from pipesh.builtins import BUILTINS, Builtin
from pipesh.path_cache import SearchPathCache, current_path, find_in_path, is_executable

logger = logging.getLogger(__name__)


class BuiltinResolution:
    def __init__(self, builtin: Builtin) -> None:
        self.builtin = builtin

    def __repr__(self) -> str:
        return f"BuiltinResolution({self.builtin.name})"


class ExternalResolution:
    def __init__(self, path: str) -> None:
        self.path = path

    def __repr__(self) -> str:
        return f"ExternalResolution({self.path})"


class NotFound:
    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()

Resolution = Union[BuiltinResolution, ExternalResolution, NotFound]


class CommandResolver:
    """
    Decide si un nombre es un builtin o un ejecutable del PATH.

    PATH se vuelve a leer del entorno en cada busqueda, asi que un cambio
    en tiempo de ejecucion tiene efecto inmediato.
    """

    def __init__(self, cache: Optional[SearchPathCache] = None) -> None:
        self.cache = cache if cache is not None else SearchPathCache()

    def resolve(self, name: str) -> Resolution:
        builtin = BUILTINS.get(name)
        if builtin is not None:
            return BuiltinResolution(builtin)

        path = self.find_external(name)
        if path is None:
            logger.debug("resolve(%r) -> not found", name)
            return NOT_FOUND
        logger.debug("resolve(%r) -> %s", name, path)
        return ExternalResolution(path)

    def find_external(self, name: str) -> Optional[str]:
        if not name:
            return None
        if os.sep in name:
            return name if is_executable(name) else None

        path_value = current_path()
        cached = self.cache.executables(path_value).get(name)
        if cached is not None and is_executable(cached):
            return cached
        # el indice puede estar desactualizado: se busca directamente
        return find_in_path(name, path_value)
