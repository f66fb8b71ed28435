"""Run the data room test suite from the repository root.

Test discovery and import paths come from ``[tool.pytest.ini_options]`` in
``pyproject.toml``; extra arguments are handed to pytest unchanged.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]


def main() -> int:
    # pytest only applies ``testpaths`` when invoked from the rootdir.
    command = [sys.executable, "-m", "pytest", "-c", str(REPO_ROOT / "pyproject.toml"), *sys.argv[1:]]
    return subprocess.run(command, cwd=str(REPO_ROOT)).returncode


if __name__ == "__main__":
    raise SystemExit(main())
