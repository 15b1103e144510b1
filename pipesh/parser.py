import logging
from typing import List

from pipesh.ast_tree import Pipeline
from pipesh.errors import ShellSyntaxError
from pipesh.redirection import RedirectionResolver

logger = logging.getLogger(__name__)

PIPE = "|"


class ShellParser:
    """
    Clase que representa el parser de la shell.
    """

    def __init__(self, tokens: List[str]) -> None:
        self.tokens = list(tokens)
        self.resolver = RedirectionResolver()

        if self.tokens:
            self._validate_token()

    def _validate_token(self) -> None:
        if self.tokens[0] == PIPE or self.tokens[-1] == PIPE:
            raise ShellSyntaxError("syntax error near unexpected token `|'")

        for i in range(len(self.tokens) - 1):
            if self.tokens[i] == PIPE and self.tokens[i + 1] == PIPE:
                raise ShellSyntaxError("syntax error near unexpected token `|'")

    def split(self) -> List[List[str]]:
        segments: List[List[str]] = []
        current: List[str] = []

        for token in self.tokens:
            if token == PIPE:
                segments.append(current)
                current = []
            else:
                current.append(token)

        if current:
            segments.append(current)
        return segments

    def parse(self) -> Pipeline:
        commands = [self.resolver.resolve(segment) for segment in self.split()]
        pipeline = Pipeline(commands)
        logger.debug("parse -> %r", pipeline)
        return pipeline
