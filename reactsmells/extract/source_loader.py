from __future__ import annotations

import fnmatch
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Tuple

from reactsmells.core.config import LintConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFile:
    path: Path          # absolute path on disk
    display_path: str   # path shown in findings, relative to the working directory when possible


def discover_sources(paths: Sequence[Path], config: LintConfig) -> List[SourceFile]:
    """
    Accepts files and directories, in any mix.
      - a file is kept when its extension is supported and it is not excluded
      - a directory is walked recursively, pruning excluded folders
    Returns files in a stable sorted order without duplicates.
    """
    seen: set[Path] = set()
    out: List[SourceFile] = []

    for raw in paths:
        p = Path(raw)
        if not p.exists():
            raise FileNotFoundError(f"Path not found: {p}")

        candidates = [(p, _display(p))] if p.is_file() else _walk(p, config.exclude)
        for fp, rel in candidates:
            resolved = fp.resolve()
            if resolved in seen:
                continue
            if fp.suffix.lower() not in config.extensions:
                logger.debug("Skipping %s: unsupported extension", fp)
                continue
            if _is_excluded(fp.name, rel, config.exclude):
                logger.debug("Skipping %s: excluded", fp)
                continue
            seen.add(resolved)
            out.append(SourceFile(path=resolved, display_path=_display(fp)))

    out.sort(key=lambda s: s.display_path)
    return out


def _walk(root: Path, exclude: Iterable[str]) -> Iterator[Tuple[Path, str]]:
    """Yield (path, path relative to `root`) for every file, pruning excluded folders."""
    patterns = tuple(exclude)
    for current, dirs, files in os.walk(root):
        here = Path(current)
        base = here.relative_to(root).as_posix()
        prefix = "" if base == "." else base + "/"
        # a folder is pruned by a bare name ("dist") or by a path glob ("src/generated/*")
        dirs[:] = sorted(d for d in dirs if not _is_excluded(d, prefix + d + "/", patterns))
        for filename in sorted(files):
            yield here / filename, prefix + filename


def _is_excluded(name: str, rel: str, patterns: Sequence[str]) -> bool:
    """
    Patterns without a slash match a single file or folder name anywhere.
    Patterns with a slash match the path relative to the walked root; a
    leading `**/` lets them match at any depth.
    """
    for pat in patterns:
        if "/" not in pat:
            if fnmatch.fnmatch(name, pat):
                return True
        elif _path_matches(rel, pat):
            return True
    return False


def _path_matches(rel: str, pat: str) -> bool:
    if pat.startswith("**/"):
        tail = pat[3:]
        parts = rel.split("/")
        return any(_path_matches("/".join(parts[i:]), tail) for i in range(len(parts)))
    return fnmatch.fnmatch(rel, pat) or fnmatch.fnmatch(rel, pat.rstrip("/") + "/*")


def _display(path: Path) -> str:
    try:
        return path.resolve().relative_to(Path.cwd().resolve()).as_posix()
    except ValueError:
        return path.as_posix()
