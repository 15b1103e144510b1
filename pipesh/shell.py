import logging
import os
import readline
import sys
from typing import Optional

from pipesh.completer import CompletionProvider, TabCompleter
from pipesh.config import ShellConfig
from pipesh.errors import ParseError, ShellExit
from pipesh.executer import CommandExecutor, _terminate
from pipesh.history import HistoryStore
from pipesh.lexer import ShellLexer
from pipesh.log import configure_logging
from pipesh.parser import ShellParser
from pipesh.path_cache import SearchPathCache
from pipesh.resolver import CommandResolver

logger = logging.getLogger(__name__)

PARSE_ERROR_STATUS = 2


class Shell:
    """
    Bucle interactivo: lee una linea, la analiza y ejecuta el pipeline.
    """

    def __init__(self, config: Optional[ShellConfig] = None) -> None:
        self.config = config if config is not None else ShellConfig.from_env()
        self.cache = SearchPathCache()
        self.history = HistoryStore()
        self.lexer = ShellLexer()
        self.resolver = CommandResolver(self.cache)
        self.executor = CommandExecutor(
            self.resolver,
            self.history,
            home=self.config.home,
            histfile=self.config.histfile,
            on_exit=self.terminate,
        )
        self.completer = TabCompleter(CompletionProvider(self.cache), prompt=self.config.prompt)

    def setup(self) -> None:
        self.completer.install()
        if hasattr(readline, "set_auto_history"):
            readline.set_auto_history(False)
        self._load_history()

    def _load_history(self) -> None:
        histfile = self.config.histfile
        if not histfile or not os.path.exists(histfile):
            return
        try:
            self.history.load(histfile)
        except OSError as e:
            logger.warning("could not read history file %s: %s", histfile, e)
            return
        self.history.mark_persisted()
        for line in self.history.entries:
            readline.add_history(line)

    def shutdown(self) -> None:
        histfile = self.config.histfile
        if not histfile:
            return
        try:
            self.history.flush(histfile)
        except OSError as e:
            print(f"pipesh: {histfile}: {e.strerror}", file=sys.stderr)

    def terminate(self, code: int) -> None:
        self.shutdown()
        _terminate(code)

    def process_command(self, line: str) -> int:
        if not line.strip():
            return 0

        self.history.append(line)
        readline.add_history(line)

        try:
            tokens = self.lexer.tokenize(line)
            pipeline = ShellParser(tokens).parse()
        except ParseError as e:
            print(f"pipesh: {e}", file=sys.stderr)
            return PARSE_ERROR_STATUS

        return self.executor.execute(pipeline)

    def run(self) -> int:
        self.setup()
        while True:
            try:
                line = input(self.config.prompt)
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                buffered = readline.get_line_buffer()
                print()
                if not buffered:
                    break
                continue

            try:
                self.process_command(line)
            except ShellExit as e:
                self.shutdown()
                return e.code
            except KeyboardInterrupt:
                print()

        self.shutdown()
        return 0


def main() -> None:
    config = ShellConfig.from_env()
    configure_logging(config.debug)
    shell = Shell(config)
    sys.exit(shell.run())


if __name__ == "__main__":
    main()
