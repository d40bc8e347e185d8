"""Profile registry core: definitions, validation and the process-wide registry."""

from profile_registry.profiles.errors import (
    DuplicateProfileId,
    MalformedProfile,
    ProfileError,
    ProfileNotFound,
    RegistryClosed,
)
from profile_registry.profiles.loader import (
    build_registry,
    load_from_directory,
    reload_profiles,
)
from profile_registry.profiles.models import (
    PhonemeEncoding,
    ProfileDefinition,
    ProfileSummary,
)
from profile_registry.profiles.registry import (
    ProfileRegistry,
    RegistryState,
    get_profile_registry,
)
from profile_registry.profiles.validator import (
    Compatibility,
    ConverterCompatibility,
    PhonemeSetValidator,
)

__all__ = [
    "Compatibility",
    "ConverterCompatibility",
    "DuplicateProfileId",
    "MalformedProfile",
    "PhonemeEncoding",
    "PhonemeSetValidator",
    "ProfileDefinition",
    "ProfileError",
    "ProfileNotFound",
    "ProfileRegistry",
    "ProfileSummary",
    "RegistryClosed",
    "RegistryState",
    "build_registry",
    "get_profile_registry",
    "load_from_directory",
    "reload_profiles",
]
