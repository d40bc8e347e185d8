# profile_registry/api/schemas.py
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from profile_registry.profiles.models import PhonemeEncoding, ProfileMode


def _normalize_symbols(value: Any) -> List[str]:
    # A single string is a whitespace-separated label, as in an interval tier.
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return value


class ProfileDetailModel(BaseModel):
    model_config = ConfigDict(protected_namespaces=())

    id: str
    display_name: str
    model_file: Optional[str] = None
    refiner_file: Optional[str] = None
    encoding: PhonemeEncoding
    mode: ProfileMode
    phoneme_set: List[str]

    @classmethod
    def from_domain(cls, profile) -> "ProfileDetailModel":
        return cls(
            id=profile.id,
            display_name=profile.display_name,
            model_file=profile.model_file,
            refiner_file=profile.refiner_file,
            encoding=profile.encoding,
            mode=profile.effective_mode,
            phoneme_set=list(profile.phoneme_set),
        )


class ClassifyRequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    symbols: List[str] = Field(
        default_factory=list, description="Candidate symbols, in order."
    )

    @field_validator("symbols", mode="before")
    @classmethod
    def normalize_symbols(cls, value: Any) -> List[str]:
        return _normalize_symbols(value)


class ClassifyResponseModel(BaseModel):
    profile: str
    valid: List[str]
    invalid: List[str]


class IntervalValidationRequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    intervals: List[str] = Field(
        ..., description="Interval labels; each may hold several space-separated symbols."
    )


class IntervalResultModel(BaseModel):
    text: str
    valid: bool
    invalid_tokens: List[str] = Field(default_factory=list)


class IntervalValidationResponseModel(BaseModel):
    profile: str
    invalid_count: int
    results: List[IntervalResultModel]


class CompatibilityRequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    phoneme_set: Optional[List[str]] = Field(
        default=None, description="Phoneme set to compare against."
    )
    profile: Optional[str] = Field(
        default=None, description="Id of a registered profile to compare against."
    )

    @model_validator(mode="after")
    def ensure_single_source(self) -> "CompatibilityRequestModel":
        if (self.phoneme_set is None) == (self.profile is None):
            raise ValueError("Provide exactly one of `phoneme_set` or `profile`.")
        return self


class CompatibilityResponseModel(BaseModel):
    profile: str
    other: Optional[str] = None
    score: str
    indicator: str


class ConverterCompatibilityRequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    supported_symbols: List[str] = Field(default_factory=list)

    @field_validator("supported_symbols", mode="before")
    @classmethod
    def normalize_symbols(cls, value: Any) -> List[str]:
        return _normalize_symbols(value)


class ConverterCompatibilityResponseModel(BaseModel):
    profile: str
    level: str
    indicator: str


class PhonemeLookupResponseModel(BaseModel):
    symbol: str
    profiles: List[str]
