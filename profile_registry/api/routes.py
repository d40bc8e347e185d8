"""HTTP route handlers for the read-only profile API."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request

from profile_registry.profiles.models import ProfileSummary
from profile_registry.profiles.registry import ProfileRegistry

from .schemas import (
    ClassifyRequestModel,
    ClassifyResponseModel,
    CompatibilityRequestModel,
    CompatibilityResponseModel,
    ConverterCompatibilityRequestModel,
    ConverterCompatibilityResponseModel,
    IntervalResultModel,
    IntervalValidationRequestModel,
    IntervalValidationResponseModel,
    PhonemeLookupResponseModel,
    ProfileDetailModel,
)


router = APIRouter()


def get_registry(request: Request) -> ProfileRegistry:
    return request.app.state.registry


@router.get("/v1/profiles", response_model=List[ProfileSummary])
async def list_profiles(registry: ProfileRegistry = Depends(get_registry)):
    return registry.list_summaries()


@router.get("/v1/profiles/{profile_id}", response_model=ProfileDetailModel)
async def get_profile(
    profile_id: str, registry: ProfileRegistry = Depends(get_registry)
):
    return ProfileDetailModel.from_domain(registry.get(profile_id))


@router.post(
    "/v1/profiles/{profile_id}/classify", response_model=ClassifyResponseModel
)
async def classify_symbols(
    profile_id: str,
    body: ClassifyRequestModel,
    registry: ProfileRegistry = Depends(get_registry),
):
    result = registry.validator(profile_id).classify(body.symbols)
    return ClassifyResponseModel(
        profile=profile_id, valid=result.valid, invalid=result.invalid
    )


@router.post(
    "/v1/profiles/{profile_id}/validate-intervals",
    response_model=IntervalValidationResponseModel,
)
async def validate_intervals(
    profile_id: str,
    body: IntervalValidationRequestModel,
    registry: ProfileRegistry = Depends(get_registry),
):
    outcome = registry.validator(profile_id).validate_intervals(body.intervals)
    results = [
        IntervalResultModel(text=text, valid=valid, invalid_tokens=tokens)
        for text, valid, tokens in zip(
            body.intervals, outcome.valid, outcome.invalid_tokens
        )
    ]
    return IntervalValidationResponseModel(
        profile=profile_id, invalid_count=outcome.invalid_count, results=results
    )


@router.post(
    "/v1/profiles/{profile_id}/compatibility",
    response_model=CompatibilityResponseModel,
)
async def score_compatibility(
    profile_id: str,
    body: CompatibilityRequestModel,
    registry: ProfileRegistry = Depends(get_registry),
):
    validator = registry.validator(profile_id)
    if body.profile is not None:
        score = validator.compatibility_score(registry.get(body.profile))
    else:
        score = validator.compatibility_score(body.phoneme_set)
    return CompatibilityResponseModel(
        profile=profile_id,
        other=body.profile,
        score=score.value,
        indicator=score.indicator,
    )


@router.post(
    "/v1/profiles/{profile_id}/converter-compatibility",
    response_model=ConverterCompatibilityResponseModel,
)
async def score_converter(
    profile_id: str,
    body: ConverterCompatibilityRequestModel,
    registry: ProfileRegistry = Depends(get_registry),
):
    level = registry.validator(profile_id).score_converter(body.supported_symbols)
    return ConverterCompatibilityResponseModel(
        profile=profile_id, level=level.value, indicator=level.indicator
    )


@router.get(
    "/v1/phonemes/{symbol}/profiles", response_model=PhonemeLookupResponseModel
)
async def find_profiles_by_phoneme(
    symbol: str, registry: ProfileRegistry = Depends(get_registry)
):
    return PhonemeLookupResponseModel(
        symbol=symbol, profiles=sorted(registry.find_by_phoneme(symbol))
    )
