"""
tests/test_project.py
=====================

Checks on the project metadata in pyproject.toml.
"""

import re
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def test_readme_is_the_project_readme():
    text = (PROJECT_ROOT / "pyproject.toml").read_text(encoding="utf-8")
    [readme] = re.findall(r'^readme\s*=\s*"([^"]+)"', text, re.MULTILINE)
    assert readme == "README.md"
    assert "borme" in (PROJECT_ROOT / readme).read_text(encoding="utf-8")
