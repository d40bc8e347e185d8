"""Phoneme membership and compatibility checks against a profile."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Iterable, List, Sequence, Union

from profile_registry.profiles.models import ProfileDefinition

SymbolSource = Union[ProfileDefinition, Iterable[str]]


class Compatibility(str, Enum):
    """How closely two phoneme sets match."""

    EXACT = "exact"
    PARTIAL = "partial"
    INCOMPATIBLE = "incompatible"

    @property
    def indicator(self) -> str:
        return _INDICATORS[self.value]


class ConverterCompatibility(str, Enum):
    """How well a phonemizer's output symbols fit a profile's inventory."""

    FULL = "full"
    PARTIAL = "partial"
    INCOMPATIBLE = "incompatible"
    UNKNOWN = "unknown"

    @property
    def indicator(self) -> str:
        return _INDICATORS[self.value]


_INDICATORS = {
    "exact": "✓",
    "full": "✓",
    "partial": "~",
    "incompatible": "✗",
    "unknown": "",
}


@dataclass(slots=True)
class ClassifiedSymbols:
    valid: List[str] = field(default_factory=list)
    invalid: List[str] = field(default_factory=list)


@dataclass(slots=True)
class IntervalValidation:
    """Per-interval outcome of validating a tier of interval labels."""

    valid: List[bool] = field(default_factory=list)
    invalid_tokens: List[List[str]] = field(default_factory=list)

    @property
    def invalid_count(self) -> int:
        return self.valid.count(False)

    @property
    def all_valid(self) -> bool:
        return self.invalid_count == 0


def _as_symbol_set(source: SymbolSource) -> AbstractSet[str]:
    if isinstance(source, ProfileDefinition):
        return source.symbols
    if isinstance(source, str):
        # A bare string is one symbol, not a sequence of characters.
        return frozenset((source,))
    return frozenset(source)


def score_compatibility(left: SymbolSource, right: SymbolSource) -> Compatibility:
    """
    Compare two phoneme sets as exact strings, ignoring order.

    The result is symmetric in its arguments.
    """
    left_set = _as_symbol_set(left)
    right_set = _as_symbol_set(right)
    if left_set == right_set:
        return Compatibility.EXACT
    if left_set & right_set:
        return Compatibility.PARTIAL
    return Compatibility.INCOMPATIBLE


class PhonemeSetValidator:
    """Answers validity queries for candidate symbols against one profile."""

    def __init__(self, profile: ProfileDefinition) -> None:
        self.profile = profile
        self._symbols = profile.symbols

    def contains(self, symbol: str) -> bool:
        return symbol in self._symbols

    def classify(self, candidates: Sequence[str]) -> ClassifiedSymbols:
        """
        Partition candidate symbols by membership.

        Both partitions keep the input order, including repeated symbols.
        """
        result = ClassifiedSymbols()
        for symbol in candidates:
            if symbol in self._symbols:
                result.valid.append(symbol)
            else:
                result.invalid.append(symbol)
        return result

    def compatibility_score(self, other: SymbolSource) -> Compatibility:
        return score_compatibility(self._symbols, other)

    def score_converter(self, supported_symbols: Iterable[str]) -> ConverterCompatibility:
        """
        Score a phonemizer by the symbols it can emit.

        A converter that declares no symbols cannot be judged. Otherwise it
        fits fully when every symbol it emits belongs to this profile.
        """
        emitted = _as_symbol_set(supported_symbols)
        if not emitted:
            return ConverterCompatibility.UNKNOWN
        if emitted <= self._symbols:
            return ConverterCompatibility.FULL
        if emitted & self._symbols:
            return ConverterCompatibility.PARTIAL
        return ConverterCompatibility.INCOMPATIBLE

    def validate_intervals(self, texts: Iterable[str]) -> IntervalValidation:
        """
        Validate interval labels, each holding one or more whitespace-separated
        symbols. Blank labels are invalid.
        """
        result = IntervalValidation()
        for text in texts:
            tokens = text.split()
            unknown = [token for token in tokens if token not in self._symbols]
            result.valid.append(bool(tokens) and not unknown)
            result.invalid_tokens.append(unknown)
        return result
