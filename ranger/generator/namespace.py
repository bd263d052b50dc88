"""Expansion of dotted namespace paths into a nested variable tree."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def split_path(path: str) -> list[str]:
    """Split ``a.b.c`` into its segments, rejecting empty ones."""
    segments = path.split(".")
    if not path or any(not s for s in segments):
        raise ConfigurationError(f"invalid variable name: {path!r}")
    return segments


def build_tree(pairs: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """Merge ordered ``(dotted-path, value)`` pairs into one nested dict.

    Pairs are applied in order. A later pair replaces whatever an earlier pair
    left at the same position, including a whole subtree when a leaf lands on a
    nested object or a nested object is needed where a leaf sits.
    """
    tree: Dict[str, Any] = {}
    for path, value in pairs:
        *parents, leaf = split_path(path)
        node = tree
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                if child is not None:
                    logger.debug(f"'{path}' replaces leaf at '{segment}'")
                child = node[segment] = {}
            node = child
        if isinstance(node.get(leaf), dict):
            logger.debug(f"'{path}' replaces subtree at '{leaf}'")
        node[leaf] = value
    return tree
