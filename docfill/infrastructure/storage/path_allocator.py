"""Unique output path allocation.

ensure_unique_path never creates the file itself; callers write afterwards
(LocalOutputStore writes with exclusive create and retries on collision).
"""

from pathlib import Path


def ensure_unique_path(directory: str | Path, desired_file_name: str) -> Path:
    """Return a path in directory that does not exist yet.

    Creates directory if absent. If desired_file_name is taken, inserts an
    incrementing '(n)' before the extension: 'a.docx' -> 'a(1).docx' -> 'a(2).docx'.
    """
    folder = Path(directory)
    folder.mkdir(parents=True, exist_ok=True)
    candidate = folder / desired_file_name
    suffix = candidate.suffix
    stem = candidate.name[: len(candidate.name) - len(suffix)] if suffix else candidate.name
    counter = 1
    while candidate.exists():
        candidate = folder / f"{stem}({counter}){suffix}"
        counter += 1
    return candidate
