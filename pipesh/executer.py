import logging
import os
import subprocess
import sys
import threading
from typing import IO, Callable, List, Optional

from pipesh.ast_tree import Pipeline, Stage
from pipesh.builtins import BuiltinContext
from pipesh.errors import ExecutionError, FileOpenError, ResolutionError, ShellExit
from pipesh.history import HistoryStore
from pipesh.redirection import open_sinks
from pipesh.resolver import BuiltinResolution, CommandResolver, ExternalResolution

logger = logging.getLogger(__name__)

NOT_FOUND_STATUS = 127


def _terminate(code: int) -> None:
    sys.stdout.flush()
    sys.stderr.flush()
    os._exit(code)


class _Fd:
    """
    Extremo de un pipe del que la etapa es duena; se cierra una sola vez.
    """
    def __init__(self, fd: Optional[int]) -> None:
        self.fd = fd

    def close(self) -> None:
        if self.fd is not None:
            os.close(self.fd)
            self.fd = None


class CommandExecutor:
    """
    Clase que representa el ejecutor de comandos.

    Un pipeline de una sola etapa se ejecuta en el hilo que llama. Con varias
    etapas cada una corre en su propio hilo, unidas por pipes del sistema, y
    `execute` no vuelve hasta que todas terminan.
    """
    def __init__(
        self,
        resolver: Optional[CommandResolver] = None,
        history: Optional[HistoryStore] = None,
        home: Optional[str] = None,
        histfile: Optional[str] = None,
        on_exit: Optional[Callable[[int], None]] = None,
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
    ) -> None:
        self.resolver = resolver if resolver is not None else CommandResolver()
        self.history = history if history is not None else HistoryStore()
        self.home = home
        self.histfile = histfile
        self.on_exit = on_exit or _terminate
        self._stdout = stdout
        self._stderr = stderr
        self.last_return_code = 0
        self.stages: List[Stage] = []

    @property
    def terminal_stdout(self) -> IO[str]:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def terminal_stderr(self) -> IO[str]:
        return self._stderr if self._stderr is not None else sys.stderr

    def execute(self, pipeline: Pipeline) -> int:
        self.stages = [Stage(i, cmd) for i, cmd in enumerate(pipeline)]
        if not self.stages:
            return 0

        if len(self.stages) == 1:
            self._run_stage(self.stages[0], _Fd(None), _Fd(None))
        else:
            self._run_concurrent(self.stages)

        self.last_return_code = self.stages[-1].returncode or 0
        return self.last_return_code

    def _run_concurrent(self, stages: List[Stage]) -> None:
        pipes = [os.pipe() for _ in range(len(stages) - 1)]

        threads = []
        for i, stage in enumerate(stages):
            stdin = _Fd(pipes[i - 1][0] if i > 0 else None)
            stdout = _Fd(pipes[i][1] if i < len(stages) - 1 else None)
            thread = threading.Thread(
                target=self._run_pipeline_stage,
                args=(stage, stdin, stdout),
                name=f"stage-{i}-{stage.command.name}",
            )
            threads.append(thread)

        for thread in threads:
            thread.start()
        try:
            for thread in threads:
                thread.join()
        except KeyboardInterrupt:
            # los hijos reciben el mismo SIGINT; se espera a que terminen
            for thread in threads:
                thread.join()
            raise

    def _run_pipeline_stage(self, stage: Stage, stdin: _Fd, stdout: _Fd) -> None:
        try:
            self._run_stage(stage, stdin, stdout)
        except ShellExit as e:
            logger.debug("exit %d from pipeline stage %d", e.code, stage.index)
            self.on_exit(e.code)

    def _run_stage(self, stage: Stage, stdin: _Fd, stdout: _Fd) -> None:
        stage.start()
        logger.debug("stage %d running: %r", stage.index, stage.command)
        try:
            try:
                sinks = open_sinks(stage.command)
            except FileOpenError as e:
                print(f"pipesh: {e}", file=self.terminal_stderr, flush=True)
                stage.finish(1)
                return

            with sinks:
                if sinks.stdout is not None:
                    # la salida va al fichero: el siguiente comando recibe EOF
                    stdout.close()
                err = sinks.stderr if sinks.stderr is not None else self.terminal_stderr

                resolution = self.resolver.resolve(stage.command.name)
                try:
                    if isinstance(resolution, BuiltinResolution):
                        rc = self._run_builtin(resolution, stage, stdout, sinks.stdout, err)
                    elif isinstance(resolution, ExternalResolution):
                        rc = self._spawn(resolution.path, stage, stdin, stdout, sinks.stdout, err)
                    else:
                        raise ResolutionError(stage.command.name)
                except (ResolutionError, ExecutionError) as e:
                    print(e, file=err, flush=True)
                    rc = NOT_FOUND_STATUS
                stage.finish(rc)
        finally:
            stdin.close()
            stdout.close()
            logger.debug("stage %d done: %r", stage.index, stage)

    def _run_builtin(
        self,
        resolution: BuiltinResolution,
        stage: Stage,
        stdout: _Fd,
        sink: Optional[IO[str]],
        err: IO[str],
    ) -> int:
        if sink is not None:
            out = sink
        elif stdout.fd is not None:
            out = os.fdopen(stdout.fd, "w", encoding="utf-8")
            stdout.fd = None
        else:
            out = self.terminal_stdout

        ctx = BuiltinContext(out, err, self.history, self.resolver, self.home, self.histfile)
        try:
            return resolution.builtin.run(stage.command.args, ctx)
        except BrokenPipeError:
            logger.debug("stage %d: reader closed the pipe", stage.index)
            return 1
        finally:
            self._release(out, sink)
            err.flush()

    def _release(self, out: IO[str], sink: Optional[IO[str]]) -> None:
        if out is self.terminal_stdout or out is sink:
            out.flush()
            return
        try:
            out.close()
        except BrokenPipeError:
            pass

    def _spawn(
        self,
        path: str,
        stage: Stage,
        stdin: _Fd,
        stdout: _Fd,
        sink: Optional[IO[str]],
        err: IO[str],
    ) -> int:
        if sink is not None:
            out = sink
        elif stdout.fd is not None:
            out = stdout.fd
        else:
            out = self.terminal_stdout

        for stream in (self.terminal_stdout, err, sink):
            if stream is not None:
                stream.flush()

        try:
            process = subprocess.Popen(
                stage.command.args,
                executable=path,
                stdin=stdin.fd,
                stdout=out,
                stderr=err,
            )
        except OSError as e:
            logger.debug("could not start %s: %s", path, e)
            raise ExecutionError(stage.command.name, e) from e
        finally:
            # el hijo tiene su copia; cerrar la nuestra propaga el EOF
            stdin.close()
            stdout.close()

        try:
            rc = process.wait()
        except KeyboardInterrupt:
            process.wait()
            raise
        if rc < 0:
            rc = 128 - rc
        return rc
