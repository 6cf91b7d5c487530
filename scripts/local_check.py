# scripts/local_check.py
"""
Pre-push gate for allocheck: packaging metadata, formatting, lint, types, tests.

Every step runs even if an earlier one fails; the exit code is the number of
failed steps, so CI can call this script directly.
"""

import subprocess
import sys
import tomllib

# (label, command, rewrites files)
STEPS = (
    ("black", "python -m black src tests scripts", True),
    ("ruff", "ruff check src tests scripts", False),
    ("mypy", "mypy src/allocheck", False),
    ("pytest", "pytest -q", False),
)


def pyproject_is_valid(path="pyproject.toml"):
    try:
        with open(path, "rb") as f:
            meta = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"pyproject: {e}")
        return False
    name = meta.get("project", {}).get("name")
    print(f"pyproject: project {name!r} OK")
    return True


def run_step(label, command, rewrites):
    print(f"\n== {label}{' (rewrites files)' if rewrites else ''}: {command}")
    code = subprocess.run(command, shell=True).returncode
    if code:
        print(f"== {label} exited with {code}")
    return code == 0


def main():
    if not pyproject_is_valid():
        return 1
    failed = [label for label, command, rewrites in STEPS if not run_step(label, command, rewrites)]
    print("\nall steps passed" if not failed else f"\nfailed: {', '.join(failed)}")
    return len(failed)


if __name__ == "__main__":
    sys.exit(main())
