"""Pytest configuration for tests."""

import pytest

from profile_registry.profiles.registry import ProfileRegistry


@pytest.fixture(scope="session")
def anyio_backend():
    """Configure anyio to use only asyncio backend."""
    return "asyncio"


@pytest.fixture
def model_profile_data():
    return {
        "id": "toy_model",
        "display_name": "Toy Model",
        "model_file": "resources/models/toy.onnx",
        "refiner_file": "resources/models/toy_refiner.onnx",
        "encoding": "IPA",
        "phoneme_set": ["a", "i", "k"],
    }


@pytest.fixture
def manual_profile_data():
    return {
        "id": "toy_manual",
        "display_name": "Manual — Toy",
        "encoding": "IPA",
        "mode": "manual",
        "phoneme_set": ["a", "e"],
    }


@pytest.fixture
def registry():
    return ProfileRegistry()
