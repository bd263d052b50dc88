"""User overrides and resolution of the final render context."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .blueprint import ROOT_KEY, Blueprint
from .errors import ConfigurationError
from .namespace import build_tree, split_path

logger = logging.getLogger(__name__)

Override = Tuple[str, str]

# (name, description, current value) -> answer
AskFn = Callable[[str, Optional[str], Optional[str]], str]


def parse_override(value: str) -> Override:
    """Parse ``key=value``; everything after the first ``=`` is the value."""
    if "=" not in value:
        raise ConfigurationError(f"Must be KEY=VALUE, got: {value!r}")
    key, val = value.split("=", 1)
    split_path(key)
    return key, val


def read_varfile(path: Path) -> List[Override]:
    """Read newline-separated ``key=value`` overrides from a file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"cannot read varfile {path}: {e}") from e

    overrides = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            overrides.append(parse_override(line))
        except ConfigurationError as e:
            raise ConfigurationError(f"{path}:{lineno}: {e}") from e
    return overrides


def collect_overrides(
    varfile: Optional[Path] = None, values: Iterable[str] = ()
) -> List[Override]:
    """Varfile entries first, then explicit values, so explicit values win."""
    overrides: List[Override] = []
    if varfile is not None:
        overrides.extend(read_varfile(varfile))
    overrides.extend(parse_override(v) for v in values)
    return overrides


def prompt_overrides(
    blueprint: Blueprint, overrides: Sequence[Override], ask: AskFn
) -> List[Override]:
    """Ask for every declared variable, offering its current value as default."""
    current = dict(overrides)
    answers = []
    for name, definition in blueprint.variables.items():
        shown = current.get(name, definition.default)
        answers.append((name, ask(name, definition.description, shown)))
    return answers


def resolve_variables(
    blueprint: Blueprint,
    overrides: Sequence[Override] = (),
    ask: Optional[AskFn] = None,
) -> Dict[str, Any]:
    """Build the render context: blueprint defaults, then overrides, under ``vars``."""
    pairs = list(blueprint.defaults())
    pairs.extend(overrides)
    if ask is not None:
        pairs.extend(prompt_overrides(blueprint, overrides, ask))

    logger.debug(f"Resolving {len(pairs)} variable assignment(s)")
    return {ROOT_KEY: build_tree(pairs)}
