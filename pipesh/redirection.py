import logging
from typing import IO, List, Optional

from pipesh.ast_tree import STDERR, STDOUT, Command, Redirect
from pipesh.errors import FileOpenError, RedirectTargetMissing, ShellSyntaxError

logger = logging.getLogger(__name__)

# operador -> (flujo, append)
REDIRECT_OPERATORS = {
    ">": (STDOUT, False),
    "1>": (STDOUT, False),
    ">>": (STDOUT, True),
    "1>>": (STDOUT, True),
    "2>": (STDERR, False),
    "2>>": (STDERR, True),
}


class RedirectionResolver:
    """
    Clase que extrae las redirecciones de un segmento del pipeline.
    """

    def resolve(self, segment: List[str]) -> Command:
        args: List[str] = []
        redirects = {STDOUT: None, STDERR: None}

        i = 0
        while i < len(segment):
            token = segment[i]
            if token not in REDIRECT_OPERATORS:
                args.append(token)
                i += 1
                continue

            if i + 1 >= len(segment) or segment[i + 1] in REDIRECT_OPERATORS:
                raise RedirectTargetMissing(token)

            stream, append = REDIRECT_OPERATORS[token]
            target = segment[i + 1]
            # solo cuenta la primera redireccion de cada flujo
            if redirects[stream] is None:
                redirects[stream] = Redirect(stream, target, append)
            else:
                logger.debug("ignoring duplicate %s redirect to %r", stream, target)
            i += 2

        if not args:
            raise ShellSyntaxError("syntax error: missing command")

        return Command(args, stdout=redirects[STDOUT], stderr=redirects[STDERR])


class OpenedSinks:
    """
    Ficheros abiertos para las redirecciones de una etapa.

    Se usa como context manager: al salir se cierran todos los ficheros
    abiertos, haya fallado o no la etapa.
    """

    def __init__(self, stdout: Optional[IO[str]] = None, stderr: Optional[IO[str]] = None) -> None:
        self.stdout = stdout
        self.stderr = stderr

    def close(self) -> None:
        for f in (self.stdout, self.stderr):
            if f is not None and not f.closed:
                f.close()

    def __enter__(self) -> "OpenedSinks":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _open(redirect: Redirect) -> IO[str]:
    try:
        return open(redirect.path, redirect.mode, encoding="utf-8")
    except OSError as e:
        raise FileOpenError(redirect.path, e.strerror) from e


def open_sinks(command: Command) -> OpenedSinks:
    sinks = OpenedSinks()
    try:
        if command.stdout is not None:
            sinks.stdout = _open(command.stdout)
        if command.stderr is not None:
            sinks.stderr = _open(command.stderr)
    except FileOpenError:
        sinks.close()
        raise
    return sinks
