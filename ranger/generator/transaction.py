"""All-or-nothing generation of an output directory."""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from . import source
from .blueprint import load_blueprint
from .errors import OutputError, OutputExistsError
from .helpers import HelperRegistry
from .models import GenerateRequest, GenerateResult
from .renderer import TemplateRenderer
from .variables import AskFn, resolve_variables

logger = logging.getLogger(__name__)


def _is_occupied(path: Path) -> bool:
    if not path.exists() and not path.is_symlink():
        return False
    if path.is_dir() and not path.is_symlink():
        return any(path.iterdir())
    return True


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def check_output(out: Path, force: bool) -> None:
    """Refuse a non-empty output path unless ``force`` is set."""
    if not force and _is_occupied(out):
        raise OutputExistsError(f"output {out} already exists (use --force to replace it)")


def prepare_output(out: Path, force: bool) -> None:
    try:
        if force and (out.exists() or out.is_symlink()):
            logger.info(f"Removing existing output {out}")
            _remove(out)
        out.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputError(f"cannot create output {out}: {e}") from e


def check_overlap(source_root: Path, out: Path) -> None:
    """Refuse an output that would contain the template source.

    An output inside the source is fine; the renderer leaves it out of the walk.
    """
    src, dst = source_root.resolve(), out.resolve()
    if src == dst or src.is_relative_to(dst):
        raise OutputError(f"output {out} contains the template source {source_root}")


class OutputTransaction:
    """One generate attempt: fetch, render, then commit or roll back.

    On success only the scratch directory (if any) is removed. On failure the
    output directory is removed as well, so callers observe either a complete
    tree or nothing.
    """

    def __init__(self, request: GenerateRequest, ask: Optional[AskFn] = None) -> None:
        self.request = request
        self.ask = ask
        self.out = Path(request.out)
        self.scratch: Optional[Path] = None
        self.created = False

    def _acquire_source(self) -> Path:
        req = self.request
        if req.repo is None:
            return source.local_source(req.folder)
        self.scratch = Path(tempfile.mkdtemp(prefix="ranger-"))
        return source.git_source(req.repo, self.scratch, req.branch, req.folder)

    def _rollback(self) -> None:
        if self.created and (self.out.exists() or self.out.is_symlink()):
            logger.warning(f"Generation failed, removing {self.out}")
            shutil.rmtree(self.out, ignore_errors=True)

    def _release(self) -> None:
        if self.scratch is not None:
            shutil.rmtree(self.scratch, ignore_errors=True)
            self.scratch = None

    def run(self) -> GenerateResult:
        check_output(self.out, self.request.force)
        try:
            source_root = self._acquire_source()
            check_overlap(source_root, self.out)
            blueprint = load_blueprint(source_root)
            context = resolve_variables(blueprint, self.request.overrides, self.ask)
            helpers = HelperRegistry(blueprint.helpers)

            prepare_output(self.out, self.request.force)
            self.created = True

            renderer = TemplateRenderer(source_root, context, helpers, strict=self.request.strict)
            written = renderer.scaffold(self.out)
        except BaseException:
            self._rollback()
            raise
        finally:
            self._release()

        files = [p for p in written if (self.out / p).is_file()]
        dirs = [p for p in written if (self.out / p).is_dir()]
        logger.info(f"Generated {len(files)} file(s) in {self.out}")
        return GenerateResult(out=self.out, files=files, directories=dirs)


def generate(request: GenerateRequest, ask: Optional[AskFn] = None) -> GenerateResult:
    """Run one generate operation for ``request``."""
    return OutputTransaction(request, ask=ask).run()
