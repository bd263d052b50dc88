"""Blueprint helpers: shell commands exposed to templates as functions."""

from __future__ import annotations

import logging
import os
import subprocess
from typing import Callable, Dict, Mapping

from .errors import HelperError

logger = logging.getLogger(__name__)

HelperFn = Callable[[object], str]


def run_helper(name: str, command: str, value: str) -> str:
    """Run ``command`` through the shell with ``VALUE`` set and return its stdout.

    Trailing newlines are stripped. A non-zero exit, a failed spawn or
    non-UTF-8 output raises ``HelperError``. stderr is left attached to the
    parent's stderr.
    """
    logger.debug(f"Invoking helper '{name}' with VALUE={value!r}")
    env = dict(os.environ, VALUE=value)
    try:
        proc = subprocess.run(
            command, shell=True, env=env, stdout=subprocess.PIPE
        )
    except OSError as e:
        raise HelperError(name, f"could not start: {e}") from e

    if proc.returncode != 0:
        raise HelperError(name, f"exited with status {proc.returncode}")
    try:
        output = proc.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise HelperError(name, f"output is not UTF-8 text: {e}") from e
    return output.rstrip("\r\n")


def make_helper(name: str, command: str) -> HelperFn:
    def helper(value) -> str:
        return run_helper(name, command, str(value))

    helper.__name__ = name
    return helper


class HelperRegistry:
    """Named single-argument helpers available to every template of one render."""

    def __init__(self, commands: Mapping[str, str] | None = None) -> None:
        self._helpers: Dict[str, HelperFn] = {}
        for name, command in (commands or {}).items():
            self.register(name, command)

    def register(self, name: str, command: str) -> None:
        self._helpers[name] = make_helper(name, command)

    def __contains__(self, name: str) -> bool:
        return name in self._helpers

    def __len__(self) -> int:
        return len(self._helpers)

    def as_globals(self) -> Dict[str, HelperFn]:
        return dict(self._helpers)
