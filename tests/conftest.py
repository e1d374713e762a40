import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]


def write(p: Path, text: str) -> Path:
    """Writes text to a file, creating parent directories when needed."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def run_cli(cwd: Path, *args: str, stdin: str = "") -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH", "")]))
    return subprocess.run(
        [sys.executable, "-m", "templet", *args],
        cwd=cwd, env=env, input=stdin, capture_output=True, text=True, encoding="utf-8",
    )


@pytest.fixture
def cli():
    """Runs the command line in a subprocess: cli(cwd, *args, stdin="")."""
    return run_cli


@pytest.fixture
def tmpproj(tmp_path: Path) -> Path:
    """Directory with a template and a data file referencing nested values."""
    write(
        tmp_path / "servers.tpl",
        "{% for config.servers as server %}"
        "{$ server.hostname }:{% for server.ips as ip %} {$ ip }{% endfor %}\n"
        "{% endfor %}",
    )
    write(
        tmp_path / "data.yaml",
        textwrap.dedent("""
        config:
          servers:
            - hostname: game-server.localhost
              ips: ["192.168.101.1", "192.168.101.2"]
            - hostname: stream-server.localhost
              ips: ["192.168.101.100"]
        """).strip() + "\n",
    )
    return tmp_path

