"""
pathlib file operation helpers

Cross-platform helpers for locating the user's ``.claude`` directory, reading
and atomically writing JSON files, and removing workspace directories.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any, Dict, Union

from ..exceptions import ParseError, SettingsError, WorkspaceError

logger = logging.getLogger(__name__)


def get_home_directory() -> Path:
    """
    Get the user's home directory, cross-platform

    Returns:
        Path of the home directory
    """
    return Path.home()


def ensure_directory_exists(dir_path: Union[str, Path], mode: int = 0o755) -> Path:
    """
    Make sure a directory exists, creating parents as needed

    Raises:
        WorkspaceError: if the directory cannot be created
    """
    path = Path(dir_path)
    try:
        path.mkdir(parents=True, exist_ok=True, mode=mode)
        return path
    except OSError as e:
        raise WorkspaceError(f"Cannot create directory '{path}': {e}", path=path, original_error=e)


def read_json_file(file_path: Union[str, Path], encoding: str = 'utf-8') -> Dict[str, Any]:
    """
    Read a JSON file that must contain an object

    Raises:
        ParseError: if the content is not valid JSON or not an object
        SettingsError: if the file cannot be read
    """
    path = Path(file_path)
    try:
        text = path.read_text(encoding=encoding)
    except OSError as e:
        raise SettingsError(f"Cannot read '{path}': {e}", path=path, original_error=e)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in '{path}': {e}", data_type="settings", original_error=e)

    if not isinstance(data, dict):
        raise ParseError(f"'{path}' must contain a JSON object", data_type="settings")
    return data


def write_json_file(file_path: Union[str, Path],
                    data: Dict[str, Any],
                    encoding: str = 'utf-8',
                    indent: int = 2) -> Path:
    """
    Write JSON data as a whole-file replace

    The document goes to a sibling temporary file first, which then replaces
    the target, so readers never see a half-written file.

    Returns:
        The written path

    Raises:
        SettingsError: if writing fails
    """
    path = Path(file_path)
    temp_path = path.with_name(path.name + '.tmp')

    try:
        ensure_directory_exists(path.parent)
        with temp_path.open('w', encoding=encoding) as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
            f.write('\n')
        temp_path.replace(path)
        return path
    except (OSError, WorkspaceError) as e:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.debug("Could not remove temporary file %s", temp_path)
        raise SettingsError(f"Cannot write '{path}': {e}", path=path, original_error=e)


def remove_tree(dir_path: Union[str, Path]) -> bool:
    """
    Delete a directory tree, ``rm -rf`` style

    A missing path is not an error. A plain file or symlink at the path is
    unlinked.

    Returns:
        True if something was deleted

    Raises:
        WorkspaceError: if the tree exists but cannot be deleted
    """
    path = Path(dir_path)
    if not path.exists() and not path.is_symlink():
        return False

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
        return True
    except OSError as e:
        raise WorkspaceError(f"Cannot delete '{path}': {e}", path=path, original_error=e)
