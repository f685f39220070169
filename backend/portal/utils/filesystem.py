from pathlib import Path


def ensure_storage_dirs(storage_path: Path) -> Path:
    storage_path.mkdir(parents=True, exist_ok=True)
    (storage_path / "resumes").mkdir(exist_ok=True)
    return storage_path


def sanitize_filename(name: str) -> str:
    keep = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789._-")
    return "".join(c if c in keep else "_" for c in name)


def resolve_inside(root: Path, relative: str) -> Path | None:
    """Resolve ``relative`` under ``root``; None if it escapes the root."""
    root = root.resolve()
    candidate = (root / relative).resolve()
    if not candidate.is_relative_to(root):
        return None
    return candidate
