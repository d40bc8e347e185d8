"""Process-wide registry of alignment model profiles."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from pathlib import PureWindowsPath
from typing import Any, Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

from profile_registry.profiles.errors import (
    DuplicateProfileId,
    MalformedProfile,
    ProfileNotFound,
    RegistryClosed,
)
from profile_registry.profiles.models import ProfileDefinition, ProfileSummary
from profile_registry.profiles.validator import PhonemeSetValidator

logger = logging.getLogger(__name__)

ProfileInput = Union[ProfileDefinition, Mapping[str, Any]]


class RegistryState(str, Enum):
    OPEN = "open"
    SEALED = "sealed"


@dataclass(frozen=True, slots=True)
class ProfileConflict:
    """Profiles that point at the same model file but disagree on its inventory."""

    model_file: str
    profile_ids: Tuple[str, ...]


def model_file_name(path: str) -> str:
    """File-name component of a model path, case-folded for comparison."""
    # PureWindowsPath splits on both "/" and "\".
    return PureWindowsPath(path).name.casefold()


class ProfileRegistry:
    """
    Registry for alignment profiles.

    Profiles are registered sequentially while the registry is open. Once
    :meth:`seal` is called the registry is read-only and can be shared by
    concurrent readers without locking.
    """

    def __init__(self, strict_model_files: bool = True) -> None:
        self.strict_model_files = strict_model_files
        self._profiles: Dict[str, ProfileDefinition] = {}
        self._phoneme_index: Dict[str, Set[str]] = defaultdict(set)
        self._validators: Dict[str, PhonemeSetValidator] = {}
        self._state = RegistryState.OPEN

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def is_sealed(self) -> bool:
        return self._state is RegistryState.SEALED

    def register(self, definition: ProfileInput) -> ProfileDefinition:
        """
        Validate and insert a profile.

        Args:
            definition: A ProfileDefinition or a raw mapping of its fields

        Returns:
            The stored definition

        Checks run in this order, and the first failure is raised.

        Raises:
            RegistryClosed: If the registry has been sealed
            MalformedProfile: If the definition violates a profile invariant
            DuplicateProfileId: If a profile with the same id is registered
            MalformedProfile: If a model-driven profile lacks model_file
                (only when strict_model_files is set)
        """
        if self.is_sealed:
            raise RegistryClosed(_raw_id(definition))

        if isinstance(definition, ProfileDefinition):
            # Re-run validation; instances built with model_construct skip it.
            profile = ProfileDefinition.parse(definition.model_dump())
        else:
            profile = ProfileDefinition.parse(definition)

        if profile.id in self._profiles:
            raise DuplicateProfileId(profile.id)

        self._check_model_file(profile)

        self._profiles[profile.id] = profile
        self._validators[profile.id] = PhonemeSetValidator(profile)
        for symbol in profile.phoneme_set:
            self._phoneme_index[symbol].add(profile.id)

        logger.debug(
            f"Registered profile: {profile.id} ({len(profile.phoneme_set)} phonemes, "
            f"mode={profile.effective_mode})"
        )
        return profile

    def _check_model_file(self, profile: ProfileDefinition) -> None:
        if profile.is_manual or profile.has_model_file:
            return
        message = "model-driven profiles must declare model_file"
        if self.strict_model_files:
            raise MalformedProfile(profile.id, [message])
        logger.warning(f"Profile '{profile.id}': {message}")

    def seal(self) -> None:
        """Close the registry to further registrations. Idempotent."""
        if self.is_sealed:
            return
        self._state = RegistryState.SEALED

        for conflict in self.find_conflicts():
            logger.warning(
                f"Model file '{conflict.model_file}' is claimed by profiles with "
                f"different phoneme sets: {', '.join(conflict.profile_ids)}"
            )
        logger.info(f"Profile registry sealed with {len(self._profiles)} profiles")

    def get(self, profile_id: str) -> ProfileDefinition:
        """
        Get a profile by ID.

        Raises:
            ProfileNotFound: If no profile has this id
        """
        try:
            return self._profiles[profile_id]
        except KeyError:
            raise ProfileNotFound(profile_id) from None

    def validator(self, profile_id: str) -> PhonemeSetValidator:
        self.get(profile_id)
        return self._validators[profile_id]

    def list_profiles(self) -> List[ProfileDefinition]:
        """All profiles in registration order."""
        return list(self._profiles.values())

    def list_summaries(self) -> List[ProfileSummary]:
        return [profile.summary() for profile in self._profiles.values()]

    def get_available_ids(self) -> List[str]:
        """Get list of available profile IDs."""
        return list(self._profiles.keys())

    def find_by_phoneme(self, symbol: str) -> Set[str]:
        """Ids of every profile whose phoneme set contains ``symbol``."""
        return set(self._phoneme_index.get(symbol, ()))

    def find_by_model_file(self, path: str) -> Optional[ProfileDefinition]:
        """
        Find the profile describing a model artifact.

        Only file names are compared (case-insensitively), so a model loaded
        from any directory resolves to the profile that declares it.
        """
        wanted = model_file_name(path)
        for profile in self._profiles.values():
            if profile.model_file and model_file_name(profile.model_file) == wanted:
                return profile
        return None

    def find_conflicts(self) -> List[ProfileConflict]:
        by_file: Dict[str, List[ProfileDefinition]] = defaultdict(list)
        for profile in self._profiles.values():
            if profile.model_file:
                by_file[model_file_name(profile.model_file)].append(profile)

        conflicts = []
        for file_name, profiles in by_file.items():
            if len({profile.symbols for profile in profiles}) > 1:
                conflicts.append(
                    ProfileConflict(
                        model_file=file_name,
                        profile_ids=tuple(profile.id for profile in profiles),
                    )
                )
        return conflicts

    def __contains__(self, profile_id: object) -> bool:
        return profile_id in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)

    def __iter__(self) -> Iterator[ProfileDefinition]:
        return iter(list(self._profiles.values()))


def _raw_id(definition: ProfileInput) -> Optional[str]:
    if isinstance(definition, ProfileDefinition):
        return definition.id
    if isinstance(definition, Mapping):
        raw = definition.get("id")
        return raw if isinstance(raw, str) else None
    return None


# Global registry instance
_registry: Optional[ProfileRegistry] = None


def get_profile_registry() -> ProfileRegistry:
    """Get the global profile registry instance."""
    global _registry
    if _registry is None:
        _registry = ProfileRegistry()
    return _registry


def set_profile_registry(registry: ProfileRegistry) -> None:
    """Install ``registry`` as the process-wide instance."""
    global _registry
    _registry = registry
