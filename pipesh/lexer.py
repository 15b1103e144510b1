import logging
from typing import List, Optional

from pipesh.errors import ShellSyntaxError

logger = logging.getLogger(__name__)

WHITESPACE = (" ", "\t")
# dentro de comillas dobles la barra solo escapa estos caracteres
DQUOTE_ESCAPABLE = ("\\", '"', "$", "\n")


class ShellLexer:
    """
    Clase que representa el lexer de la shell.

    Convierte una linea en una lista de palabras respetando comillas simples,
    comillas dobles y escapes con barra invertida. Los operadores (`|`, `>`,
    `2>>`, ...) no se marcan de forma especial: se reconocen despues por
    comparacion exacta de cadenas.
    """

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.tokens: List[str] = []
        self.current_token = ""
        self.in_token = False
        self.quote_char: Optional[str] = None

    def tokenize(self, line: str) -> List[str]:
        self._reset()

        i = 0
        while i < len(line):
            char = line[i]

            if self.quote_char == "'":
                if char == "'":
                    self.quote_char = None
                else:
                    self.current_token += char
                i += 1
                continue

            if self.quote_char == '"':
                if char == '"':
                    self.quote_char = None
                elif char == "\\" and i + 1 < len(line) and line[i + 1] in DQUOTE_ESCAPABLE:
                    self.current_token += line[i + 1]
                    i += 1
                else:
                    self.current_token += char
                i += 1
                continue

            if char in WHITESPACE:
                self.add_token()
                i += 1
                continue

            if char in ("'", '"'):
                self.quote_char = char
                self.in_token = True
                i += 1
                continue

            if char == "\\":
                self.in_token = True
                if i + 1 < len(line):
                    self.current_token += line[i + 1]
                    i += 2
                else:
                    self.current_token += char
                    i += 1
                continue

            self.current_token += char
            self.in_token = True
            i += 1

        if self.quote_char is not None:
            raise ShellSyntaxError(
                f"unexpected EOF while looking for matching `{self.quote_char}'"
            )

        self.add_token()
        logger.debug("tokenize(%r) -> %r", line, self.tokens)
        return self.tokens

    def add_token(self) -> None:
        # in_token permite conservar palabras vacias como '' o ""
        if self.in_token:
            self.tokens.append(self.current_token)
        self.current_token = ""
        self.in_token = False
