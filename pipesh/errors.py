from typing import Optional


class ShellError(Exception):
    """
    Clase base de los errores de la shell.
    """


class ParseError(ShellError):
    """
    Error al analizar una linea: comillas, pipes o redirecciones mal formadas.
    """


class ShellSyntaxError(ParseError):
    pass


class RedirectTargetMissing(ParseError):
    def __init__(self, operator: str) -> None:
        super().__init__("syntax error near unexpected token `newline'")
        self.operator = operator


class ResolutionError(ShellError):
    def __init__(self, name: str) -> None:
        super().__init__(f"{name}: command not found")
        self.name = name


class ExecutionError(ShellError):
    def __init__(self, name: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{name}: command not found")
        self.name = name
        self.cause = cause


class FilesystemError(ShellError):
    pass


class FileOpenError(FilesystemError):
    def __init__(self, path: str, strerror: Optional[str]) -> None:
        super().__init__(f"{path}: {strerror or 'No such file or directory'}")
        self.path = path
        self.strerror = strerror


class ShellExit(ShellError):
    """
    Señal de control lanzada por el builtin `exit`.
    """

    def __init__(self, code: int = 0) -> None:
        super().__init__(f"exit {code}")
        self.code = code
