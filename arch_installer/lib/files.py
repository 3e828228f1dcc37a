from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def target_path(root: str, rel: str) -> Path:
    return Path(root) / rel.lstrip("/")


def write_file(root: str, rel: str, contents: str, *, append: bool = False, dry_run: bool = False) -> Path:
    p = target_path(root, rel)
    if dry_run:
        logger.info("Would %s %s", "append to" if append else "write", str(p))
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    if append:
        with p.open("a", encoding="utf-8") as fh:
            fh.write(contents)
    else:
        p.write_text(contents, encoding="utf-8")
    logger.info("%s %s", "Appended to" if append else "Wrote", str(p))
    return p


def backup_file(path: str, *, suffix: str = ".backup", dry_run: bool = False) -> str:
    dst = path + suffix
    if dry_run:
        logger.info("Would back up %s to %s", path, dst)
        return dst
    shutil.copy2(path, dst)
    logger.info("Backed up %s to %s", path, dst)
    return dst


def substitute(text: str, pattern: str, repl: str, *, flags: int = re.MULTILINE) -> tuple[str, int]:
    return re.subn(pattern, lambda _m: repl, text, flags=flags)


def edit_file(root: str, rel: str, pattern: str, repl: str, *, dry_run: bool = False) -> int:
    """Regex-replace in place (sed -i). Returns the number of substitutions."""

    p = target_path(root, rel)
    if dry_run:
        logger.info("Would edit %s: %s -> %s", str(p), pattern, repl)
        return 0
    text = p.read_text(encoding="utf-8")
    new_text, count = substitute(text, pattern, repl)
    if count:
        p.write_text(new_text, encoding="utf-8")
    logger.info("Edited %s (%d substitution(s))", str(p), count)
    return count
