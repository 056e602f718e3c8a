"""Pack a generated directory tree into a single zip archive."""

from __future__ import annotations

import zipfile
from pathlib import Path

# Fixed timestamp so identical trees produce identical archives
_ZIP_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def pack_directory(directory: Path | str, archive_path: Path | str) -> Path:
    """Zip every file under ``directory`` into ``archive_path``, overwriting it.

    Entry names are POSIX paths relative to ``directory``, written in sorted
    order.
    """
    root = Path(directory)
    target = Path(archive_path)
    if not root.is_dir():
        raise NotADirectoryError(str(root))

    target.parent.mkdir(parents=True, exist_ok=True)
    files = sorted(p for p in root.rglob("*") if p.is_file())
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in files:
            info = zipfile.ZipInfo(path.relative_to(root).as_posix(), date_time=_ZIP_DATE_TIME)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = 0o644 << 16
            zf.writestr(info, path.read_bytes())
    return target


def list_entries(archive_path: Path | str) -> list[str]:
    """Return the file names stored in an archive."""
    with zipfile.ZipFile(archive_path) as zf:
        return [name for name in zf.namelist() if not name.endswith("/")]
