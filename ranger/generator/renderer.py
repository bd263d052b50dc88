from __future__ import annotations

import logging
import shutil
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterator, List, Optional

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
    Undefined,
    UndefinedError,
)

from .blueprint import BLUEPRINT_FILE
from .errors import HelperError, RenderError, ResolutionError
from .helpers import HelperRegistry

logger = logging.getLogger(__name__)

IGNORED_NAMES = frozenset({".git"})


def iter_entries(root: Path, skip: Optional[Path] = None) -> Iterator[Path]:
    """Depth-first walk of ``root``, entries sorted by name within a directory.

    Symlinked directories are yielded but not followed. ``skip`` is left out
    together with everything below it.
    """
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.name in IGNORED_NAMES:
            continue
        if skip is not None and entry.resolve() == skip:
            logger.debug(f"Skipping output root {entry}")
            continue
        yield entry
        if entry.is_dir():
            if entry.is_symlink():
                logger.debug(f"Not following symlinked directory {entry}")
            else:
                yield from iter_entries(entry, skip)


class TreeEnvironment(Environment):
    """Resolves ``a.b`` on variable trees by key only.

    Plain dict methods (``items``, ``copy``, ...) are never reachable through
    attribute syntax, so a missing key is always undefined.
    """

    def getattr(self, obj, attribute):
        if isinstance(obj, dict):
            try:
                return obj[attribute]
            except KeyError:
                return self.undefined(obj=obj, name=attribute)
        return super().getattr(obj, attribute)


def _is_text(data: bytes) -> bool:
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return False
    return True


class TemplateRenderer:
    def __init__(
        self,
        source_root: Path,
        context: Dict[str, Any],
        helpers: Optional[HelperRegistry] = None,
        strict: bool = True,
    ) -> None:
        self.source_root = Path(source_root)
        self.context = context
        self.env = TreeEnvironment(
            loader=FileSystemLoader(str(self.source_root)),
            undefined=StrictUndefined if strict else Undefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        if helpers is not None:
            self.env.globals.update(helpers.as_globals())

    def _render(self, load, where: str) -> str:
        try:
            return load().render(**self.context)
        except HelperError:
            raise
        except UndefinedError as e:
            raise ResolutionError(f"{where}: {e}") from e
        except TemplateError as e:
            raise RenderError(f"{where}: {e}") from e
        except Exception as e:
            raise RenderError(f"{where}: {type(e).__name__}: {e}") from e

    def render_string(self, text: str, where: str) -> str:
        return self._render(lambda: self.env.from_string(text), where)

    def render_file(self, rel: PurePosixPath) -> str:
        return self._render(lambda: self.env.get_template(str(rel)), str(rel))

    def output_path(self, rel: PurePosixPath, out_dir: Path) -> Optional[Path]:
        """Render a relative source path; None means the entry is skipped."""
        rendered = PurePosixPath(self.render_string(str(rel), f"path {rel}"))
        if str(rendered) == BLUEPRINT_FILE:
            return None
        if rendered.is_absolute() or ".." in rendered.parts:
            raise RenderError(f"path {rel} renders outside the output root: {rendered}")
        return out_dir.joinpath(*rendered.parts)

    def scaffold(self, out_dir: Path) -> List[Path]:
        """Render the whole source tree into ``out_dir``.

        Returns the rendered relative output paths in walk order.
        """
        out_dir = Path(out_dir)
        written: List[Path] = []

        for src_path in iter_entries(self.source_root, skip=out_dir.resolve()):
            rel = PurePosixPath(src_path.relative_to(self.source_root).as_posix())
            dst_path = self.output_path(rel, out_dir)
            if dst_path is None:
                logger.debug(f"Skipping blueprint {rel}")
                continue

            try:
                if src_path.is_dir():
                    dst_path.mkdir(parents=True, exist_ok=True)
                else:
                    self._write_file(src_path, rel, dst_path)
            except OSError as e:
                raise RenderError(f"{rel}: {e}") from e

            logger.debug(f"Rendered {rel} → {dst_path}")
            written.append(dst_path.relative_to(out_dir))

        return written

    def _write_file(self, src_path: Path, rel: PurePosixPath, dst_path: Path) -> None:
        dst_path.parent.mkdir(parents=True, exist_ok=True)
        data = src_path.read_bytes()
        if _is_text(data):
            dst_path.write_text(self.render_file(rel), encoding="utf-8")
        else:
            logger.debug(f"Copying binary file {rel}")
            dst_path.write_bytes(data)
        shutil.copymode(src_path, dst_path)
