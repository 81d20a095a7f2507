# app/services/storage.py
"""
Хранилище загруженных изображений.

Файлы лежат в UPLOAD_DIR/<directory>/<timestamp>-<name>, наружу
отдаются через StaticFiles по UPLOAD_URL_PREFIX (см. main.py).
"""
from __future__ import annotations

import logging
import re
import shutil
import time
from pathlib import Path
from typing import Optional

from app.core.config import settings
from app.core.errors import ValidationError

logger = logging.getLogger(__name__)

_SAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


def _safe(part: str) -> str:
    return _SAFE_RE.sub("_", (part or "").strip()).strip("._") or "file"


class LocalObjectStore:
    def __init__(self, root: str, url_prefix: str, allowed_types: Optional[list[str]] = None):
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")
        self.allowed_types = allowed_types or []

    def _url(self, rel: str) -> str:
        return f"{self.url_prefix}/{rel}"

    def _path_from_url(self, url: str) -> Optional[Path]:
        prefix = self.url_prefix + "/"
        if not url or not url.startswith(prefix):
            return None
        rel = url[len(prefix):]
        path = (self.root / rel).resolve()
        # только внутри root
        if self.root.resolve() not in path.parents:
            return None
        return path

    def upload(self, data: bytes, directory: str, filename: str, content_type: str | None = None) -> str:
        if self.allowed_types and content_type and content_type not in self.allowed_types:
            raise ValidationError(f"File type not allowed: {content_type}")

        rel_dir = "/".join(_safe(p) for p in (directory or "images").split("/") if p)
        name = f"{int(time.time() * 1000)}-{_safe(filename)}"
        target = self.root / rel_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

        logger.info(f"Stored upload {rel_dir}/{name} ({len(data)} bytes)")
        return self._url(f"{rel_dir}/{name}")

    def delete(self, url: str | None) -> bool:
        path = self._path_from_url(url or "")
        if path is None or not path.is_file():
            return False
        path.unlink()
        return True

    def list(self, prefix: str = "") -> list[dict]:
        base = self.root / prefix if prefix else self.root
        if not base.exists():
            return []
        out = []
        for p in sorted(base.rglob("*")):
            if p.is_file():
                rel = p.relative_to(self.root).as_posix()
                out.append({"name": rel, "url": self._url(rel)})
        return out

    def delete_all(self) -> int:
        files = self.list()
        if not self.root.exists():
            return 0
        for child in self.root.iterdir():
            if child.is_dir():
                shutil.rmtree(child)
            else:
                child.unlink()
        return len(files)


def get_object_store() -> LocalObjectStore:
    return LocalObjectStore(
        root=settings.UPLOAD_DIR,
        url_prefix=settings.UPLOAD_URL_PREFIX,
        allowed_types=settings.allowed_image_types,
    )
