"""Profile loading from YAML/JSON declarations."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional

import orjson
import yaml

from profile_registry.profiles.errors import DuplicateProfileId, MalformedProfile
from profile_registry.profiles.models import ProfileDefinition
from profile_registry.profiles.registry import ProfileRegistry, set_profile_registry

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}
JSON_SUFFIXES = {".json"}

BUNDLED_PROFILES_DIR = Path(__file__).resolve().parent.parent / "data" / "models"


def _read_declaration(path: Path) -> Any:
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        raw = path.read_bytes()
        return orjson.loads(raw) if raw.strip() else None
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_profile_file(path: str | Path) -> Optional[ProfileDefinition]:
    """
    Parse a single profile declaration.

    Args:
        path: YAML or JSON file holding one profile mapping

    Returns:
        The parsed definition, or None if the file is empty

    Raises:
        MalformedProfile: If the declaration is not a valid profile
        yaml.YAMLError / orjson.JSONDecodeError: If the file cannot be parsed
    """
    profile_path = Path(path)
    data = _read_declaration(profile_path)
    if not data:
        logger.warning(f"Empty profile file: {profile_path}")
        return None

    try:
        return ProfileDefinition.parse(data)
    except MalformedProfile as e:
        raise e.with_source(str(profile_path)) from e


def iter_profile_files(profiles_dir: Path) -> List[Path]:
    """Profile files in a directory, sorted by name for a stable load order."""
    return sorted(
        p
        for p in profiles_dir.iterdir()
        if p.is_file() and p.suffix.lower() in YAML_SUFFIXES | JSON_SUFFIXES
    )


def load_from_directory(
    registry: ProfileRegistry, profiles_dir: str | Path
) -> List[ProfileDefinition]:
    """
    Register every profile declared in a directory.

    Args:
        registry: Open registry to register into
        profiles_dir: Path to directory containing profile files

    Returns:
        The registered definitions, in load order

    Raises:
        MalformedProfile: If a profile fails validation
        DuplicateProfileId: If two files declare the same id
    """
    profiles_path = Path(profiles_dir)
    if not profiles_path.exists():
        logger.warning(f"Profiles directory not found: {profiles_dir}")
        return []

    if not profiles_path.is_dir():
        logger.error(f"Profiles path is not a directory: {profiles_dir}")
        return []

    loaded: List[ProfileDefinition] = []
    for profile_file in iter_profile_files(profiles_path):
        try:
            profile = load_profile_file(profile_file)
            if profile is None:
                continue
            loaded.append(registry.register(profile))
            logger.debug(f"Loaded profile: {profile.id} from {profile_file}")

        except (yaml.YAMLError, orjson.JSONDecodeError) as e:
            logger.error(f"Parse error in {profile_file}: {e}")
            raise
        except MalformedProfile as e:
            logger.error(f"Validation error in {profile_file}: {e}")
            if e.source is None:
                raise e.with_source(str(profile_file)) from e
            raise
        except DuplicateProfileId as e:
            logger.error(f"Duplicate profile in {profile_file}: {e}")
            raise
        except Exception as e:
            logger.error(f"Unexpected error loading {profile_file}: {e}")
            raise

    if loaded:
        logger.info(f"Profiles loaded: {', '.join(p.id for p in loaded)}")
    else:
        logger.info("No profiles loaded")
    return loaded


def build_registry(
    profiles_dir: str | Path = BUNDLED_PROFILES_DIR,
    strict_model_files: bool = True,
    seal: bool = True,
) -> ProfileRegistry:
    """Create a registry populated from ``profiles_dir``."""
    registry = ProfileRegistry(strict_model_files=strict_model_files)
    load_from_directory(registry, profiles_dir)
    if seal:
        registry.seal()
    return registry


def reload_profiles(
    profiles_dir: str | Path = BUNDLED_PROFILES_DIR,
    strict_model_files: bool = True,
    seal: bool = True,
) -> ProfileRegistry:
    """
    Rebuild the process-wide registry from a directory.

    A sealed registry is never modified; a fresh one replaces it instead.
    The previous instance stays installed if loading fails.
    """
    registry = build_registry(profiles_dir, strict_model_files, seal)
    set_profile_registry(registry)
    return registry
