"""
Assertion helpers shared across test modules
"""
from pathlib import Path
from typing import List


def staged_files(staging_dir: Path) -> List[Path]:
    """Files currently present in the staging directory"""
    if not staging_dir.exists():
        return []
    return list(staging_dir.iterdir())
