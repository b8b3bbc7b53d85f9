"""
Bump the mazerion version in mazerion/__init__.py and pyproject.toml.

Usage:
    python scripts/bump_version.py 0.2.0
    python scripts/bump_version.py 0.2.0rc1 --dry-run
"""

from __future__ import annotations

import argparse
import re
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
INIT_PATH = ROOT / "mazerion" / "__init__.py"
PYPROJECT_PATH = ROOT / "pyproject.toml"

VERSION_RE = re.compile(r"^\d+\.\d+\.\d+((a|b|rc)\d+)?(\.post\d+)?(\.dev\d+)?$")
INIT_PATTERN = r'__version__\s*=\s*"[^"]+"'
PYPROJECT_PATTERN = r'(?m)^version\s*=\s*"[^"]+"'


def substitute(path: Path, pattern: str, replacement: str, dry_run: bool) -> bool:
    """Replace the first match of ``pattern`` in ``path``. Returns False if nothing matched."""
    text = path.read_text()
    new_text, count = re.subn(pattern, replacement, text, count=1)
    if count and not dry_run:
        path.write_text(new_text)
    return bool(count)


def main() -> None:
    parser = argparse.ArgumentParser(description="Bump the mazerion version")
    parser.add_argument("version", help="New version, e.g. 0.2.0 or 0.2.0rc1")
    parser.add_argument("--dry-run", action="store_true", help="Report without writing")
    args = parser.parse_args()

    if not VERSION_RE.match(args.version):
        raise SystemExit(f"Not a release version: {args.version}")

    if not substitute(INIT_PATH, INIT_PATTERN, f'__version__ = "{args.version}"', args.dry_run):
        raise SystemExit("Could not find __version__ in mazerion/__init__.py")
    if not substitute(PYPROJECT_PATH, PYPROJECT_PATTERN, f'version = "{args.version}"', args.dry_run):
        raise SystemExit("Could not find a static version in pyproject.toml")

    action = "Would bump" if args.dry_run else "Bumped"
    print(f"{action} version to {args.version}")


if __name__ == "__main__":
    main()
