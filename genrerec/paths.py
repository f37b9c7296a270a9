from __future__ import annotations

from pathlib import Path


def resolve_path(repo_root: Path, p: Path | str) -> Path:
    """Resolve `p` against `repo_root` unless it is already absolute."""
    p_path = Path(p) if isinstance(p, str) else p
    if not p_path.is_absolute():
        p_path = repo_root / p_path
    return p_path.resolve()


def get_repo_root() -> Path:
    """Return repo root by searching upwards for `config.yaml` or `.git`."""
    start = Path.cwd().resolve()
    if start.is_file():
        start = start.parent

    for candidate in (start, *start.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    # Fallback: search upwards from this file (useful if called from elsewhere).
    start = Path(__file__).resolve().parent
    for candidate in (start, *start.parents):
        if (candidate / "config.yaml").is_file() or (candidate / ".git").exists():
            return candidate

    raise FileNotFoundError("Could not locate repo root (expected `config.yaml` or `.git`).")
