"""
AssetDock Backend - Bundle Loader
===================================

What:  Populates the Asset Registry from a built admin UI directory.
How:   Walks the directory once, keeps files whose name matches an include
       glob and no exclude glob, reads their bytes and keys them as
       `<namespace><posix path relative to the directory>`.
Who:   Called by the application lifespan hook before the server accepts
       connections; tests use `load_bundle_sync`.
When:  Exactly once per process. Nothing re-reads the directory afterwards,
       so a bundle swapped on disk takes effect only after a restart.

Directory → registry example (namespace "admin/"):
    dist/
    ├── index.html              → admin/index.html
    ├── assets/
    │   ├── index-4f2a1c.js     → admin/assets/index-4f2a1c.js
    │   ├── index-4f2a1c.js.map → (excluded by "*.map")
    │   └── index-9b7e0d.css    → admin/assets/index-9b7e0d.css
    └── favicon.ico             → admin/favicon.ico

Failure modes:
    Missing directory → empty registry + warning (service reports unavailable)
    Unreadable file   → BundleLoadError (never a partially loaded registry)
"""

import asyncio
import fnmatch
import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import aiofiles

from assetdock.exceptions import BundleLoadError
from assetdock.services.registry import AssetRegistry

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE: Tuple[str, ...] = (
    "*.html", "*.js", "*.css", "*.ico", "*.png", "*.svg",
    "*.woff", "*.woff2", "*.ttf", "*.eot",
)
DEFAULT_EXCLUDE: Tuple[str, ...] = ("*.map",)


def matches_patterns(
    relative_path: str,
    include: Sequence[str] = DEFAULT_INCLUDE,
    exclude: Sequence[str] = DEFAULT_EXCLUDE,
) -> bool:
    """
    True if the file belongs in the bundle.

    Patterns are matched against the file name and the full relative path,
    so both `*.map` and `assets/*.map` work. An empty include list keeps
    every file.
    """
    name = relative_path.rpartition("/")[2]

    def _any(patterns: Iterable[str]) -> bool:
        return any(
            fnmatch.fnmatchcase(name, p) or fnmatch.fnmatchcase(relative_path, p)
            for p in patterns
        )

    if include and not _any(include):
        return False
    return not _any(exclude)


def discover_bundle_files(
    directory: Path,
    include: Sequence[str] = DEFAULT_INCLUDE,
    exclude: Sequence[str] = DEFAULT_EXCLUDE,
) -> List[Tuple[Path, str]]:
    """Sorted `(absolute path, relative posix path)` pairs selected for the bundle."""
    selected = []
    for path in sorted(directory.rglob("*")):
        if not path.is_file():
            continue
        relative = path.relative_to(directory).as_posix()
        if matches_patterns(relative, include, exclude):
            selected.append((path, relative))
    return selected


def _check_directory(directory: Path) -> bool:
    if not directory.is_dir():
        logger.warning(
            "Admin UI bundle directory %s not found; the admin interface will be unavailable",
            directory,
        )
        return False
    return True


async def load_bundle(
    directory: str,
    namespace: str = "admin/",
    include: Sequence[str] = DEFAULT_INCLUDE,
    exclude: Sequence[str] = DEFAULT_EXCLUDE,
) -> AssetRegistry:
    """
    Read the bundle with async file I/O and build the registry.

    Raises:
        BundleLoadError if a selected file cannot be read.
    """
    root = Path(directory).resolve()
    if not await asyncio.to_thread(_check_directory, root):
        return AssetRegistry.empty()

    # Blocking stat/readdir walk runs in a worker thread
    selected = await asyncio.to_thread(discover_bundle_files, root, include, exclude)

    entries: List[Tuple[str, bytes]] = []
    for path, relative in selected:
        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except OSError as e:
            logger.error("Failed to read bundle file %s: %s", path, str(e))
            raise BundleLoadError(
                message=f"Failed to read bundle file '{relative}'",
                path=str(path),
                context={"os_error": str(e)},
            ) from e
        entries.append((f"{namespace}{relative}", data))

    registry = AssetRegistry(entries)
    logger.info(
        "Loaded %d bundle assets (%d bytes) from %s",
        len(registry),
        sum(len(data) for _, data in entries),
        root,
    )
    return registry


def load_bundle_sync(
    directory: str,
    namespace: str = "admin/",
    include: Sequence[str] = DEFAULT_INCLUDE,
    exclude: Sequence[str] = DEFAULT_EXCLUDE,
) -> AssetRegistry:
    """Blocking twin of `load_bundle` for scripts and tests."""
    root = Path(directory).resolve()
    if not _check_directory(root):
        return AssetRegistry.empty()

    entries: List[Tuple[str, bytes]] = []
    for path, relative in discover_bundle_files(root, include, exclude):
        try:
            data = path.read_bytes()
        except OSError as e:
            raise BundleLoadError(
                message=f"Failed to read bundle file '{relative}'",
                path=str(path),
                context={"os_error": str(e)},
            ) from e
        entries.append((f"{namespace}{relative}", data))
    return AssetRegistry(entries)
