"""Exceptions raised by the profile registry."""

from __future__ import annotations

from typing import List, Optional


class ProfileError(Exception):
    """Base class for all registry errors."""

    def __init__(self, message: str, profile_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.profile_id = profile_id


class MalformedProfile(ProfileError, ValueError):
    """A profile definition violates its shape or consistency rules."""

    def __init__(
        self,
        profile_id: Optional[str],
        errors: List[str],
        source: Optional[str] = None,
    ) -> None:
        self.errors = list(errors)
        self.source = source
        label = f"'{profile_id}'" if profile_id else "<unnamed>"
        where = f" ({source})" if source else ""
        message = f"Malformed profile {label}{where}: {'; '.join(self.errors)}"
        super().__init__(message, profile_id)

    def with_source(self, source: str) -> "MalformedProfile":
        """Return a copy of this error annotated with the file it came from."""
        return MalformedProfile(self.profile_id, self.errors, source=source)


class DuplicateProfileId(ProfileError):
    def __init__(self, profile_id: str) -> None:
        super().__init__(f"Profile id already registered: {profile_id}", profile_id)


class RegistryClosed(ProfileError):
    def __init__(self, profile_id: Optional[str] = None) -> None:
        target = f" '{profile_id}'" if profile_id else ""
        super().__init__(
            f"Registry is sealed; cannot register profile{target}", profile_id
        )


class ProfileNotFound(ProfileError, KeyError):
    """Lookup miss. Subclasses KeyError so mapping-style callers can catch it."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(f"Unknown profile: {profile_id}", profile_id)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0])
