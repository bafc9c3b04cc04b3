"""Loading, validation and writing of the serviceVersions.json manifest."""

import json
import os
import stat
import tempfile
from pathlib import Path


# Group -> version maps, in the order they are written back
SCHEMA = {
    "PROXY": ("VELOCITY", "BUNGEECORD", "WATERFALL"),
    "SERVER": ("PAPER", "PUFFERFISH", "PURPUR", "FOLIA", "VANILLA"),
}

# Maps no provider writes; their entries are carried over unchecked
PASS_THROUGH = {("PROXY", "BUNGEECORD"), ("SERVER", "PUFFERFISH")}


class ManifestError(Exception):
    """The manifest file could not be read, parsed or written."""


def version_to_key(version: str) -> str:
    """Normalize a version string into a manifest key ("1.21.1" -> "1_21_1")."""
    return version.replace(".", "_")


def _validate_version_map(name: str, version_map: object) -> None:
    if not isinstance(version_map, dict):
        raise ManifestError(f"{name} must be an object, got {type(version_map).__name__}")

    for key, entry in version_map.items():
        if not isinstance(entry, dict):
            raise ManifestError(f"{name}.{key} must be an object")
        if not isinstance(entry.get("url"), str):
            raise ManifestError(f"{name}.{key} is missing a string 'url'")
        snapshot = entry.get("snapshot")
        if snapshot is not None and not isinstance(snapshot, bool):
            raise ManifestError(f"{name}.{key}.snapshot must be a boolean")


def load_manifest(path: Path) -> dict:
    """Read and validate the manifest at ``path``.

    The structure is:
    {
        "PROXY": {"VELOCITY": {...}, "BUNGEECORD": {...}, "WATERFALL": {...}},
        "SERVER": {"PAPER": {...}, "PUFFERFISH": {...}, "PURPUR": {...},
                   "FOLIA": {...}, "VANILLA": {...}}
    }

    where each version map looks like ``{"1_21_1": {"url": "...", "snapshot": false}}``.
    Groups or maps missing from the file are created empty; unknown keys
    are kept as they are. Entries of BUNGEECORD and PUFFERFISH are not
    checked since nothing here reads or writes them.

    Raises:
        ManifestError: the file is missing, unreadable or malformed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ManifestError(f"Manifest not found: {path}") from e
    except OSError as e:
        raise ManifestError(f"Could not read manifest {path}: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ManifestError(f"Manifest {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object")

    for group, map_names in SCHEMA.items():
        section = data.setdefault(group, {})
        if not isinstance(section, dict):
            raise ManifestError(f"{group} must be an object")
        for map_name in map_names:
            version_map = section.setdefault(map_name, {})
            if (group, map_name) in PASS_THROUGH:
                if not isinstance(version_map, dict):
                    raise ManifestError(f"{group}.{map_name} must be an object")
                continue
            _validate_version_map(f"{group}.{map_name}", version_map)

    return data


def _ordered(data: dict) -> dict:
    """Return a copy with known groups first and version keys sorted."""
    ordered = {}
    for group, map_names in SCHEMA.items():
        section = data[group]
        ordered_section = {
            name: dict(sorted(section[name].items())) for name in map_names
        }
        for name, value in section.items():
            ordered_section.setdefault(name, value)
        ordered[group] = ordered_section

    for key, value in data.items():
        ordered.setdefault(key, value)

    return ordered


def _file_mode(path: Path) -> int:
    """Permission bits the written manifest should carry."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def save_manifest(path: Path, data: dict) -> None:
    """Write the manifest back to ``path`` with 2-space indentation.

    The document goes to a temporary file next to ``path`` first and then
    replaces it, so a failed write leaves the previous file intact. The
    permissions of an existing file are kept.

    Raises:
        ManifestError: the file could not be written
    """
    text = json.dumps(_ordered(data), indent=2) + "\n"

    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise ManifestError(f"Could not create manifest {path}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp_path, _file_mode(path))
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise ManifestError(f"Could not write manifest {path}: {e}") from e
