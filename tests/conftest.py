import shutil
import subprocess
from pathlib import Path

import pytest


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A template folder with a blueprint, a helper and a parameterized directory."""
    root = tmp_path / "template"
    (root / "{{ vars.app.name }}").mkdir(parents=True)
    (root / ".ranger.yaml").write_text(
        "version: '1'\n"
        "variables:\n"
        "  app.name:\n"
        "    default: demo\n"
        "  author.name:\n"
        "    default: Ann\n"
        "helpers:\n"
        "  shout: echo \"$VALUE\" | tr a-z A-Z\n",
        encoding="utf-8",
    )
    (root / "README.md").write_text("# {{ shout(vars.app.name) }}\n", encoding="utf-8")
    (root / "{{ vars.app.name }}" / "__init__.py").write_text(
        "__author__ = \"{{ vars.author.name }}\"\n", encoding="utf-8"
    )
    return root


@pytest.fixture
def git_repo(tmp_path: Path, template_dir: Path) -> str:
    """The template folder committed to a local git repository, as a file:// URL."""
    if shutil.which("git") is None:
        pytest.skip("git not available")
    repo = tmp_path / "repo"
    shutil.copytree(template_dir, repo / "tpl")

    def git(*args):
        subprocess.run(
            ["git", "-c", "user.name=t", "-c", "user.email=t@example.com", "-c", "commit.gpgsign=false", *args],
            cwd=repo, check=True, capture_output=True,
        )

    git("init", "-b", "main")
    git("add", "-A")
    git("commit", "-m", "template")
    return repo.as_uri()
