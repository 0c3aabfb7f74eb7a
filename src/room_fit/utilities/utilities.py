from __future__ import annotations

import secrets
from collections.abc import Collection
from pathlib import Path

from pydantic import BaseModel


class Utilities:
    """Small file I/O and id helpers for consistent, readable output across the project."""

    def __init__(self) -> None:
        raise RuntimeError("Utilities is a static class; do not instantiate it.")

    @staticmethod
    def ensure_parent_dir(path: Path) -> None:
        """Create the parent directory for a file path (no-op if it already exists)."""
        path.parent.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def ensure_env_file(
        env_path: Path = Path(".env"),
        example_path: Path = Path(".env.example"),
    ) -> None:
        """Create .env from .env.example if .env is missing."""
        if env_path.exists() or not example_path.exists():
            return
        Utilities.write_bytes(env_path, example_path.read_bytes())

    @staticmethod
    def write_json(path: Path, model: BaseModel, *, indent: int = 2) -> None:
        """Write a Pydantic model to disk as pretty-printed JSON."""
        Utilities.ensure_parent_dir(path)
        path.write_text(model.model_dump_json(indent=indent), encoding="utf-8")

    @staticmethod
    def read_text(path: Path, *, encoding: str = "utf-8") -> str:
        return path.read_text(encoding=encoding)

    @staticmethod
    def write_bytes(path: Path, data: bytes) -> None:
        """Write raw bytes to disk (overwrites existing file)."""
        Utilities.ensure_parent_dir(path)
        path.write_bytes(data)

    @staticmethod
    def make_id(prefix: str, taken: Collection[str] = ()) -> str:
        """
        Create a short id like 'bed_3f9a' that is not in `taken`.
        """
        while True:
            candidate = f"{prefix}_{secrets.token_hex(2)}"
            if candidate not in taken:
                return candidate
