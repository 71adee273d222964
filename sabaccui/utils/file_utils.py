"""File operation utilities"""

import hashlib
import json
import shutil
from pathlib import Path
from typing import Any, Union

import aiofiles

from ..constants import DEFAULT_SIBLING_MARKER


async def calculate_file_hash_async(file_path: Path,
                                    algorithm: str = "sha256",
                                    chunk_size: int = 8192) -> str:
    """
    Calculate file hash asynchronously

    Args:
        file_path: Path to file
        algorithm: Hash algorithm
        chunk_size: Read chunk size

    Returns:
        Hex digest string
    """
    hash_func = hashlib.new(algorithm)

    async with aiofiles.open(file_path, 'rb') as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            hash_func.update(chunk)

    return hash_func.hexdigest()


async def files_identical(file1: Path, file2: Path) -> bool:
    """
    Compare two files byte for byte

    Args:
        file1: First file path
        file2: Second file path

    Returns:
        True if files have identical content
    """
    # Quick size check first
    if file1.stat().st_size != file2.stat().st_size:
        return False

    return await calculate_file_hash_async(file1) == await calculate_file_hash_async(file2)


async def copy_file_async(src: Path, dst: Path, chunk_size: int = 1024 * 1024) -> None:
    """
    Copy a file, creating the destination directory if needed

    Args:
        src: Source file
        dst: Destination file
        chunk_size: Copy chunk size
    """
    dst.parent.mkdir(parents=True, exist_ok=True)

    async with aiofiles.open(src, 'rb') as fsrc:
        async with aiofiles.open(dst, 'wb') as fdst:
            while True:
                chunk = await fsrc.read(chunk_size)
                if not chunk:
                    break
                await fdst.write(chunk)

    # Keep the executable bit on scripts
    shutil.copymode(src, dst)


def default_sibling_path(path: Path) -> Path:
    """
    Path used for an incoming file that collides with a customized one

    ``nuxt.config.ts`` becomes ``nuxt.config.default.ts``, ``Makefile``
    becomes ``Makefile.default`` and ``.env`` becomes ``.env.default``.
    """
    return path.with_name(f"{path.stem}{DEFAULT_SIBLING_MARKER}{path.suffix}")


def is_within(path: Path, root: Path) -> bool:
    """Check that ``path`` resolves to a location inside ``root``"""
    try:
        path.resolve().relative_to(root.resolve())
        return True
    except ValueError:
        return False


def write_json(path: Path, data: Any, indent: int = 2) -> None:
    """Write JSON with a trailing newline"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
        f.write('\n')


def safe_remove(path: Union[str, Path]) -> bool:
    """
    Safely remove file or directory

    Args:
        path: Path to remove

    Returns:
        True if successful
    """
    path = Path(path)
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        return True
    except OSError:
        return False
