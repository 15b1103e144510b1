import logging
import os
import readline
import sys
from typing import IO, Callable, List, Optional, Tuple

from pipesh.builtins import BUILTIN_NAMES
from pipesh.path_cache import SearchPathCache, current_path

logger = logging.getLogger(__name__)

BELL = "\x07"
COMPLETER_DELIMS = " \t\n|"


class CompletionProvider:
    """
    Candidatos de autocompletado: builtins y ejecutables del PATH.
    """

    def __init__(self, cache: Optional[SearchPathCache] = None) -> None:
        self.cache = cache if cache is not None else SearchPathCache()

    def complete(self, prefix: str) -> List[str]:
        names = set(n for n in BUILTIN_NAMES if n.startswith(prefix))
        names.update(
            n for n in self.cache.executables(current_path()) if n.startswith(prefix)
        )
        return sorted(names)


class TabCompleter:
    """
    Maneja el tabulador de readline sobre un CompletionProvider.

    Con varias coincidencias sin prefijo comun mas largo, el primer TAB
    suena la campana y un segundo TAB seguido, sin editar la linea, lista
    los candidatos y vuelve a dibujar el prompt.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        prompt: str = "$ ",
        out: Optional[IO[str]] = None,
        line_buffer: Optional[Callable[[], str]] = None,
    ) -> None:
        self.provider = provider
        self.prompt = prompt
        self.out = out
        self.line_buffer = line_buffer or readline.get_line_buffer
        self.matches: List[str] = []
        self.pending_listing = False
        self.last_key: Optional[Tuple[str, str]] = None

    def install(self) -> None:
        readline.set_completer(self.completer)
        readline.set_completer_delims(COMPLETER_DELIMS)
        if readline.__doc__ and "libedit" in readline.__doc__:
            readline.parse_and_bind("bind ^I rl_complete")
        else:
            readline.parse_and_bind("tab: complete")

    def completer(self, text: str, state: int) -> Optional[str]:
        if state == 0:
            self.matches = self.attempt(text)
        if state < len(self.matches):
            return self.matches[state]
        return None

    def attempt(self, text: str) -> List[str]:
        key = (text, self.line_buffer())
        repeated = self.pending_listing and key == self.last_key
        self.last_key = key
        self.pending_listing = False

        candidates = self.provider.complete(text)
        logger.debug("complete(%r) -> %d candidates", text, len(candidates))

        # GNU readline tambien suena sin coincidencias; libedit no
        if not candidates:
            self._write(BELL)
            return []

        if len(candidates) == 1:
            return [candidates[0] + " "]

        common = os.path.commonprefix(candidates)
        if len(common) > len(text):
            return [common]

        if repeated:
            self._write("\n" + "  ".join(candidates) + "\n" + self.prompt + key[1])
        else:
            self._write(BELL)
            self.pending_listing = True
        return []

    def _write(self, text: str) -> None:
        out = self.out if self.out is not None else sys.stdout
        out.write(text)
        out.flush()
