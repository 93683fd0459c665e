"""Helpers shared by the test modules."""

import io
import json
import zipfile
from typing import Dict, List


def make_zip(files: Dict[str, bytes]) -> bytes:
    """Build an in-memory zip archive from a path -> content mapping."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def write_manifest(path, mods, **extra) -> str:
    document = {"mods": mods}
    document.update(extra)
    path.write_text(json.dumps(document), encoding="utf-8")
    return str(path)


def list_entries(archive_path: str) -> List[str]:
    """Files stored in a zip archive, directory entries excluded."""
    with zipfile.ZipFile(archive_path) as zf:
        return sorted(n for n in zf.namelist() if not n.endswith("/"))
