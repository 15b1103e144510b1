import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_PROMPT = "$ "



@dataclass
class ShellConfig:
    """
    Configuracion de la shell tomada del entorno.
    """
    prompt: str = DEFAULT_PROMPT
    home: Optional[str] = None
    histfile: Optional[str] = None
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ShellConfig":
        environ = os.environ if environ is None else environ
        return cls(
            prompt=environ.get("PIPESH_PROMPT", DEFAULT_PROMPT),
            home=environ.get("HOME") or None,
            histfile=environ.get("HISTFILE") or None,
            debug=environ.get("PIPESH_DEBUG", "").lower() in ("1", "true", "yes", "on"),
        )
