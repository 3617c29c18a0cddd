"""JSON helpers for the host's settings.json document.

The installer only ever touches hook entries tagged with its ownership
marker (``"_managed_by": <marker>``) under a fixed set of event names.
Everything else in the document is carried over untouched and in order.

The pure functions here (``strip_managed_entries``, ``inject_managed_entries``,
``find_managed_command``) never mutate their input; they return a deep copy.
``SettingsJSONHandler`` wraps loading and saving a file around them.
"""

import copy
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config import HOOK_TIMEOUT_SECONDS, MANAGED_BY
from ..exceptions import ParseError, SettingsError
from ..types import ManagedHookEntry
from .file_operations import read_json_file, write_json_file

MARKER_KEY = "_managed_by"


def is_managed_entry(entry: Any, marker: str = MANAGED_BY) -> bool:
    """Return True if a hook entry carries the given ownership marker."""
    return isinstance(entry, dict) and entry.get(MARKER_KEY) == marker


def build_managed_entry(command: str, marker: str = MANAGED_BY,
                        timeout: int = HOOK_TIMEOUT_SECONDS) -> ManagedHookEntry:
    """Build a tagged hook entry running a single command."""
    return {
        MARKER_KEY: marker,
        "hooks": [{"type": "command", "command": command, "timeout": timeout}],
    }


def _hooks_section(document: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    hooks = document.get("hooks")
    if hooks is None:
        return None
    if not isinstance(hooks, dict):
        raise ParseError("'hooks' section must be a JSON object", data_type="settings")
    return hooks


def _event_entries(hooks: Mapping[str, Any], event: str) -> List[Any]:
    entries = hooks.get(event)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ParseError(f"'hooks.{event}' must be a JSON array", data_type="settings")
    return entries


def count_managed_entries(document: Mapping[str, Any], events: Iterable[str],
                          marker: str = MANAGED_BY) -> int:
    """Count marker-tagged entries across the given events."""
    hooks = _hooks_section(document)
    if not hooks:
        return 0
    return sum(
        1
        for event in events
        for entry in _event_entries(hooks, event)
        if is_managed_entry(entry, marker)
    )


def find_managed_command(document: Mapping[str, Any], event: str,
                         marker: str = MANAGED_BY) -> Optional[str]:
    """Return the command of the first tagged entry for an event, if any."""
    hooks = _hooks_section(document)
    if not hooks:
        return None

    for entry in _event_entries(hooks, event):
        if not is_managed_entry(entry, marker):
            continue
        commands = entry.get("hooks")
        if isinstance(commands, list) and commands and isinstance(commands[0], dict):
            command = commands[0].get("command")
            return command if isinstance(command, str) else None
        return None
    return None


def strip_managed_entries(document: Mapping[str, Any], events: Iterable[str],
                          marker: str = MANAGED_BY) -> Dict[str, Any]:
    """Remove tagged entries and prune the containers they leave empty.

    An event list that becomes empty is deleted, and so is the ``hooks``
    object when this call leaves it empty. Containers that were already
    empty before stripping are left alone.
    """
    result = copy.deepcopy(dict(document))
    hooks = _hooks_section(result)
    if hooks is None:
        return result

    pruned = False
    for event in events:
        if event not in hooks:
            continue
        entries = _event_entries(hooks, event)
        kept = [entry for entry in entries if not is_managed_entry(entry, marker)]
        if len(kept) == len(entries):
            continue
        if kept:
            hooks[event] = kept
        else:
            del hooks[event]
            pruned = True

    if pruned and not hooks:
        del result["hooks"]
    return result


def inject_managed_entries(document: Mapping[str, Any], commands: Mapping[str, str],
                           marker: str = MANAGED_BY,
                           timeout: int = HOOK_TIMEOUT_SECONDS) -> Dict[str, Any]:
    """Replace tagged entries with exactly one fresh entry per event.

    Args:
        document: settings document
        commands: event name -> command to run for that event
        marker: ownership marker
        timeout: timeout written into each command descriptor

    Returns:
        A new document. Foreign entries keep their relative order and the
        tagged entry is appended after them.
    """
    result = copy.deepcopy(dict(document))
    hooks = _hooks_section(result)
    if hooks is None:
        hooks = result["hooks"] = {}

    for event, command in commands.items():
        kept = [entry for entry in _event_entries(hooks, event)
                if not is_managed_entry(entry, marker)]
        kept.append(build_managed_entry(command, marker, timeout))
        hooks[event] = kept

    return result


class SettingsJSONHandler:
    """Load and save one settings.json file.

    A missing file loads as an empty document. ``save`` always writes the
    whole document through a temporary file.
    """

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)
        self._parsed_data: Optional[Dict[str, Any]] = None

    def exists(self) -> bool:
        return self.file_path.exists()

    def load(self) -> Dict[str, Any]:
        """Load and parse the file.

        Raises:
            ParseError: invalid JSON, or not a JSON object
            SettingsError: the file exists but cannot be read
        """
        if not self.exists():
            self._parsed_data = {}
        else:
            self._parsed_data = read_json_file(self.file_path)
            _hooks_section(self._parsed_data)
        return self._parsed_data

    def save(self, data: Optional[Dict[str, Any]] = None) -> Path:
        """Write data (or the loaded document) back to disk.

        Raises:
            SettingsError: nothing to save, or the write failed
        """
        if data is not None:
            self._parsed_data = data
        if self._parsed_data is None:
            raise SettingsError("No data to save. Call load() first or provide data.",
                                path=self.file_path)
        return write_json_file(self.file_path, self._parsed_data)


def load_settings(file_path: Union[str, Path]) -> Dict[str, Any]:
    """Convenience wrapper: load a settings document, missing file -> {}."""
    return SettingsJSONHandler(file_path).load()

