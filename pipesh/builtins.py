import os
from abc import ABC, abstractmethod
from typing import IO, TYPE_CHECKING, Dict, List, Optional, Tuple

from pipesh.errors import ShellExit
from pipesh.history import HistoryStore

if TYPE_CHECKING:
    from pipesh.resolver import CommandResolver

HISTORY_FIELD_WIDTH = 5


class BuiltinContext:
    """
    Flujos y estado de la shell disponibles para un builtin.
    """
    def __init__(
        self,
        stdout: IO[str],
        stderr: IO[str],
        history: HistoryStore,
        resolver: "CommandResolver",
        home: Optional[str] = None,
        histfile: Optional[str] = None,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.history = history
        self.resolver = resolver
        self.home = home
        self.histfile = histfile

    def out(self, text: str) -> None:
        self.stdout.write(text + "\n")

    def err(self, text: str) -> None:
        self.stderr.write(text + "\n")


class Builtin(ABC):
    """
    Clase base de los comandos internos.
    """
    name = ""

    @abstractmethod
    def run(self, args: List[str], ctx: BuiltinContext) -> int:
        """Ejecuta el builtin; args[0] es el nombre del comando."""

    def __repr__(self) -> str:
        return f"Builtin({self.name})"


class ExitBuiltin(Builtin):
    name = "exit"

    def run(self, args: List[str], ctx: BuiltinContext) -> int:
        if len(args) < 2:
            raise ShellExit(0)
        try:
            code = int(args[1])
        except ValueError:
            ctx.err(f"exit: {args[1]}: numeric argument required")
            raise ShellExit(2)
        raise ShellExit(code & 0xFF)


class EchoBuiltin(Builtin):
    name = "echo"

    def run(self, args: List[str], ctx: BuiltinContext) -> int:
        ctx.out(" ".join(args[1:]))
        return 0


class PwdBuiltin(Builtin):
    name = "pwd"

    def run(self, args: List[str], ctx: BuiltinContext) -> int:
        try:
            cwd = os.getcwd()
        except OSError as e:
            ctx.err(f"pwd: error retrieving current directory: {e.strerror}")
            return 1
        ctx.out(cwd)
        return 0


class CdBuiltin(Builtin):
    name = "cd"

    def run(self, args: List[str], ctx: BuiltinContext) -> int:
        target = args[1] if len(args) > 1 else "~"

        path = self._expand(target, ctx.home)
        if path is None:
            ctx.err(f"cd: {target}: No such file or directory")
            return 1

        try:
            os.chdir(path)
        except OSError as e:
            ctx.err(f"cd: {target}: {e.strerror}")
            return 1
        return 0

    @staticmethod
    def _expand(target: str, home: Optional[str]) -> Optional[str]:
        if target == "~" or target.startswith("~/"):
            if not home:
                return None
            return home + target[1:]
        return target


class TypeBuiltin(Builtin):
    name = "type"

    def run(self, args: List[str], ctx: BuiltinContext) -> int:
        status = 0
        for name in args[1:]:
            if name in BUILTINS:
                ctx.out(f"{name} is a shell builtin")
                continue
            path = ctx.resolver.find_external(name)
            if path:
                ctx.out(f"{name} is {path}")
            else:
                ctx.err(f"{name}: not found")
                status = 1
        return status


class HistoryBuiltin(Builtin):
    name = "history"

    FILE_OPTIONS = ("-r", "-w", "-a")

    def run(self, args: List[str], ctx: BuiltinContext) -> int:
        if len(args) < 2:
            self._print(ctx.history.numbered(), ctx)
            return 0

        option = args[1]
        if option in self.FILE_OPTIONS:
            path = args[2] if len(args) > 2 else ctx.histfile
            if not path:
                ctx.err(f"history: {option}: option requires an argument")
                return 1
            return self._file_option(option, path, ctx)

        try:
            count = int(option)
        except ValueError:
            ctx.err(f"history: {option}: numeric argument required")
            return 1
        self._print(ctx.history.last(count), ctx)
        return 0

    def _file_option(self, option: str, path: str, ctx: BuiltinContext) -> int:
        try:
            if option == "-r":
                ctx.history.load(path)
            elif option == "-w":
                ctx.history.flush(path)
            else:
                ctx.history.append_new(path)
        except OSError as e:
            ctx.err(f"history: {path}: {e.strerror}")
            return 1
        return 0

    @staticmethod
    def _print(entries: List[Tuple[int, str]], ctx: BuiltinContext) -> None:
        for number, line in entries:
            ctx.out(f"{number:{HISTORY_FIELD_WIDTH}d}  {line}")


BUILTINS: Dict[str, Builtin] = {
    builtin.name: builtin
    for builtin in (
        ExitBuiltin(),
        EchoBuiltin(),
        PwdBuiltin(),
        CdBuiltin(),
        TypeBuiltin(),
        HistoryBuiltin(),
    )
}

BUILTIN_NAMES = tuple(sorted(BUILTINS))
