"""Alignment model profile definitions."""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import Any, FrozenSet, List, Literal, Mapping, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from profile_registry.profiles.errors import MalformedProfile

logger = logging.getLogger(__name__)

ProfileMode = Literal["manual", "model"]


class PhonemeEncoding(str, Enum):
    """Symbol notations a phoneme set can be written in."""

    IPA = "IPA"
    ARPABET = "ARPABET"
    XSAMPA = "XSAMPA"
    ROMAJI = "Romaji"
    CUSTOM = "Custom"

    @classmethod
    def parse(cls, value: str) -> "PhonemeEncoding":
        """Case-insensitive lookup; unknown notations fall back to IPA."""
        for member in cls:
            if member.value.lower() == value.strip().lower():
                return member
        logger.warning(f"Unknown phoneme encoding '{value}', assuming IPA")
        return cls.IPA


class ProfileSummary(BaseModel):
    """Listing view of a profile."""

    model_config = ConfigDict(protected_namespaces=())

    id: str
    display_name: str
    encoding: PhonemeEncoding
    mode: ProfileMode
    model_file: Optional[str] = None
    phoneme_count: int


class ProfileDefinition(BaseModel):
    """
    One alignment profile: model metadata plus the phoneme inventory it accepts.

    Instances are immutable. Construction, directly or through :meth:`parse`,
    reports every violation as a single :class:`MalformedProfile`.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    id: str = Field(..., description="Unique profile identifier")
    display_name: str = Field(..., description="Human-readable label")
    model_file: Optional[str] = Field(
        default=None, description="Path to the alignment model artifact"
    )
    refiner_file: Optional[str] = Field(
        default=None, description="Path to the boundary refiner artifact"
    )
    encoding: PhonemeEncoding = Field(default=PhonemeEncoding.IPA)
    mode: Optional[ProfileMode] = Field(
        default=None, description="'manual' for model-free profiles; absent means model-driven"
    )
    phoneme_set: Tuple[str, ...] = Field(
        ..., description="Ordered inventory of unique symbols"
    )

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise MalformedProfile(_raw_profile_id(data), _format_errors(exc)) from exc

    @field_validator("id", "display_name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("model_file", "refiner_file", mode="before")
    @classmethod
    def normalize_empty_path(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("encoding", mode="before")
    @classmethod
    def parse_encoding(cls, v: Any) -> Any:
        if v is None:
            return PhonemeEncoding.IPA
        if isinstance(v, str) and not isinstance(v, PhonemeEncoding):
            return PhonemeEncoding.parse(v)
        return v

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: Any) -> Any:
        # Blank means absent, as for the file paths.
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @field_validator("phoneme_set", mode="before")
    @classmethod
    def require_string_symbols(cls, v: Any) -> Any:
        if isinstance(v, (str, bytes)) or not isinstance(v, (list, tuple)):
            raise ValueError("must be a list of symbol strings")
        bad = [item for item in v if not isinstance(item, str)]
        if bad:
            raise ValueError(f"symbols must be strings, got {bad!r}")
        return v

    @field_validator("phoneme_set")
    @classmethod
    def validate_phoneme_set(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        if not v:
            raise ValueError("must contain at least one symbol")
        if any(symbol == "" for symbol in v):
            raise ValueError("symbols must not be empty strings")
        duplicates = [symbol for symbol, count in Counter(v).items() if count > 1]
        if duplicates:
            raise ValueError(f"duplicate symbols: {', '.join(duplicates)}")
        return v

    @model_validator(mode="after")
    def validate_manual_mode(self) -> "ProfileDefinition":
        if self.mode == "manual":
            present = [
                name
                for name in ("model_file", "refiner_file")
                if getattr(self, name) is not None
            ]
            if present:
                raise ValueError(
                    f"manual profiles must not declare {' or '.join(present)}"
                )
        return self

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> "ProfileDefinition":
        """
        Build a definition from a raw mapping.

        Raises:
            MalformedProfile: If the mapping violates any field or consistency rule
        """
        if not isinstance(data, Mapping):
            raise MalformedProfile(
                None, [f"expected a mapping, got {type(data).__name__}"]
            )
        bad_keys = [key for key in data if not isinstance(key, str)]
        if bad_keys:
            raise MalformedProfile(
                _raw_profile_id(data), [f"field names must be strings, got {bad_keys!r}"]
            )
        return cls(**data)

    @property
    def symbols(self) -> FrozenSet[str]:
        """The phoneme set as a set, for membership tests."""
        return frozenset(self.phoneme_set)

    @property
    def is_manual(self) -> bool:
        return self.mode == "manual"

    @property
    def effective_mode(self) -> ProfileMode:
        return "manual" if self.is_manual else "model"

    @property
    def has_model_file(self) -> bool:
        return self.model_file is not None

    @property
    def has_refiner_file(self) -> bool:
        return self.refiner_file is not None

    def summary(self) -> ProfileSummary:
        return ProfileSummary(
            id=self.id,
            display_name=self.display_name,
            encoding=self.encoding,
            mode=self.effective_mode,
            model_file=self.model_file,
            phoneme_count=len(self.phoneme_set),
        )


def _raw_profile_id(data: Mapping[str, Any]) -> Optional[str]:
    raw_id = data.get("id")
    return raw_id if isinstance(raw_id, str) and raw_id.strip() else None


def _format_errors(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return messages
