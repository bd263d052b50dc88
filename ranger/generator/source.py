"""Template sources: a local folder or a shallow git clone."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from .errors import FetchError

logger = logging.getLogger(__name__)


def local_source(folder: Path) -> Path:
    """Return ``folder`` as a template root, checking that it is a directory."""
    folder = Path(folder)
    if not folder.is_dir():
        raise FetchError(f"template folder not found: {folder}")
    return folder


def clone_command(repo: str, dest: Path, branch: Optional[str] = None) -> List[str]:
    cmd = ["git", "clone", "--depth", "1", "--single-branch"]
    if branch:
        cmd += ["--branch", branch]
    return cmd + [repo, str(dest)]


def fetch_repository(repo: str, dest: Path, branch: Optional[str] = None) -> Path:
    """Shallow-clone ``repo`` at ``branch`` into ``dest`` and return ``dest``."""
    cmd = clone_command(repo, dest, branch)
    logger.info(f"Cloning {repo}" + (f" ({branch})" if branch else ""))
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise FetchError(f"cannot run git: {e}") from e

    if proc.returncode != 0:
        lines = proc.stderr.strip().splitlines()
        detail = lines[-1] if lines else f"exit status {proc.returncode}"
        raise FetchError(f"git clone of {repo} failed: {detail}")
    return dest


def git_source(repo: str, scratch: Path, branch: Optional[str] = None, folder: Path = Path(".")) -> Path:
    """Fetch ``repo`` under ``scratch`` and return the template folder inside it."""
    checkout = fetch_repository(repo, Path(scratch) / "checkout", branch)
    root = checkout / folder
    if not root.is_dir():
        raise FetchError(f"folder {folder} not found in {repo}")
    return root
