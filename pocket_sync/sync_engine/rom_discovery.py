"""
ROM Discovery

Finds the ROMs on the Pocket that a save belongs to and maps ROM paths to
the save paths the Pocket expects.

Author: pocket_sync Project
License: MIT
"""

from pathlib import Path, PurePosixPath
from typing import Iterable, Set

from ..utils.file_ops import has_extension
from ..utils.logger import get_logger

logger = get_logger(__name__)

ASSETS_DIR = "Assets"
SAVES_DIR = "Saves"
SAVE_EXTENSION = ".sav"


def game_title(game: str) -> str:
    """Strip the save extension from a game name."""
    if game.lower().endswith(SAVE_EXTENSION):
        return game[:-len(SAVE_EXTENSION)]
    return game


def find_matching_roms(game: str, extensions: Iterable[str], root: str) -> Set[PurePosixPath]:
    """
    Find every ROM under ``<root>/Assets`` whose name matches ``game``.
    
    Args:
        game: Save file name, e.g. ``"Tetris.sav"``
        extensions: ROM extensions of the save's core
        root: Pocket root directory
        
    Returns:
        ROM paths relative to ``root``
    """
    root_path = Path(root)
    assets = root_path / ASSETS_DIR
    title = game_title(game)
    extensions = tuple(extensions)
    
    if not assets.is_dir():
        logger.warning(f"No {ASSETS_DIR} directory under {root_path}")
        return set()
    
    found = set()
    for candidate in assets.rglob("*"):
        if candidate.is_file() and candidate.stem == title and has_extension(candidate.name, extensions):
            found.add(PurePosixPath(candidate.relative_to(root_path).as_posix()))
    
    logger.debug(f"Found {len(found)} ROM(s) for {title}")
    return found


def rom_path_to_save_path(rom_path: PurePosixPath) -> PurePosixPath:
    """
    Map ``Assets/<platform>/...<name>.<ext>`` to ``Saves/<platform>/...<name>.sav``.
    """
    rom_path = PurePosixPath(rom_path)
    parts = list(rom_path.parts)
    if parts and parts[0] == ASSETS_DIR:
        parts[0] = SAVES_DIR
    return PurePosixPath(*parts).with_suffix(SAVE_EXTENSION)
