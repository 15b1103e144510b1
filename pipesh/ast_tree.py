from enum import Enum
from typing import List, Optional

STDOUT = "stdout"
STDERR = "stderr"


class Redirect:
    """
    Clase que representa una redireccion de salida en el AST.
    """
    def __init__(self, stream: str, path: str, append: bool = False) -> None:
        self.stream = stream
        self.path = path
        self.append = append

    @property
    def mode(self) -> str:
        return "a" if self.append else "w"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Redirect):
            return NotImplemented
        return (self.stream, self.path, self.append) == (
            other.stream,
            other.path,
            other.append,
        )

    def __repr__(self) -> str:
        op = ">>" if self.append else ">"
        return f"Redirect({self.stream} {op} {self.path})"


class Command:
    """
    Clase que representa un comando en el AST.
    """
    def __init__(
        self,
        args: List[str],
        stdout: Optional[Redirect] = None,
        stderr: Optional[Redirect] = None,
    ) -> None:
        self.args = args
        self.stdout = stdout
        self.stderr = stderr

    @property
    def name(self) -> str:
        return self.args[0]

    @property
    def redirects(self) -> List[Redirect]:
        return [r for r in (self.stdout, self.stderr) if r is not None]

    def __repr__(self) -> str:
        return f"Command({self.args}, {self.redirects})"


class Pipeline:
    """
    Clase que representa un pipeline en el AST.
    """
    def __init__(self, commands: List[Command]) -> None:
        self.commands = commands

    def __len__(self) -> int:
        return len(self.commands)

    def __iter__(self):
        return iter(self.commands)

    def __repr__(self) -> str:
        return f"Pipeline({' | '.join(repr(c) for c in self.commands)})"


class StageState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class Stage:
    """
    Clase que representa una etapa de un pipeline durante su ejecucion.
    """
    def __init__(self, index: int, command: Command) -> None:
        self.index = index
        self.command = command
        self.state = StageState.PENDING
        self.returncode: Optional[int] = None

    def start(self) -> None:
        self.state = StageState.RUNNING

    def finish(self, returncode: int) -> None:
        # un estado de salida distinto de cero tambien cuenta como fallo
        self.returncode = returncode
        if returncode == 0:
            self.state = StageState.COMPLETED
        else:
            self.state = StageState.FAILED

    def __repr__(self) -> str:
        return f"Stage({self.index}, {self.command.name}, {self.state.value}, rc={self.returncode})"
