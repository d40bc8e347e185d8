import pytest
from httpx import ASGITransport, AsyncClient

from profile_registry.config import Settings
from profile_registry.main import create_application
from profile_registry.profiles.loader import build_registry
from profile_registry.profiles.registry import get_profile_registry


@pytest.fixture(scope="module")
def test_app():
    return create_application(registry=build_registry())


async def _get(app, url):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        return await client.get(url)


async def _post(app, url, payload):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        return await client.post(url, json=payload)


@pytest.mark.anyio
async def test_healthz(test_app):
    response = await _get(test_app, "/healthz")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["profiles"] == 3
    assert body["registry_state"] == "sealed"


def test_profiles_loaded_at_startup(tmp_path):
    app = create_application(settings=Settings(profiles_dir=tmp_path))
    assert get_profile_registry() is app.state.registry
    assert get_profile_registry().is_sealed
    assert len(get_profile_registry()) == 0


@pytest.mark.anyio
async def test_list_profiles_endpoint(test_app):
    response = await _get(test_app, "/v1/profiles")
    assert response.status_code == 200
    profiles = response.json()
    assert [p["id"] for p in profiles] == ["manual_en", "rex_manual", "rex_model"]

    rex = profiles[2]
    assert rex["mode"] == "model"
    assert rex["encoding"] == "IPA"
    assert rex["phoneme_count"] == 39
    assert profiles[0]["mode"] == "manual"
    assert profiles[0]["model_file"] is None


@pytest.mark.anyio
async def test_get_profile_endpoint(test_app):
    response = await _get(test_app, "/v1/profiles/rex_model")
    assert response.status_code == 200
    body = response.json()
    assert body["display_name"] == "Allosaurus REX (Japanese)"
    assert body["refiner_file"] == "resources/models/rex_refiner.onnx"
    assert body["phoneme_set"][:3] == ["a", "i", "ɯ"]


@pytest.mark.anyio
async def test_unknown_profile_404(test_app):
    response = await _get(test_app, "/v1/profiles/nonexistent")
    assert response.status_code == 404
    data = response.json()
    assert data["error"] == "unknown_profile"
    assert data["profile"] == "nonexistent"
    assert data["available"] == ["manual_en", "rex_manual", "rex_model"]


@pytest.mark.anyio
async def test_classify_endpoint(test_app):
    response = await _post(
        test_app,
        "/v1/profiles/rex_model/classify",
        {"symbols": ["k", "o", "θ", "n", "ɲ"]},
    )
    assert response.status_code == 200
    assert response.json() == {
        "profile": "rex_model",
        "valid": ["k", "o", "n"],
        "invalid": ["θ", "ɲ"],
    }


@pytest.mark.anyio
async def test_classify_accepts_label_string(test_app):
    response = await _post(
        test_app, "/v1/profiles/manual_en/classify", {"symbols": "tʃ ɯ _"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["valid"] == ["tʃ", "_"]
    assert body["invalid"] == ["ɯ"]


@pytest.mark.anyio
async def test_classify_rejects_unknown_fields(test_app):
    response = await _post(
        test_app, "/v1/profiles/rex_model/classify", {"phonemes": ["a"]}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


@pytest.mark.anyio
async def test_validate_intervals_endpoint(test_app):
    response = await _post(
        test_app,
        "/v1/profiles/rex_model/validate-intervals",
        {"intervals": ["k a", "ts ɯ", "", "θ"]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["invalid_count"] == 2
    assert [r["valid"] for r in body["results"]] == [True, True, False, False]
    assert body["results"][3]["invalid_tokens"] == ["θ"]


@pytest.mark.anyio
async def test_compatibility_against_profile(test_app):
    response = await _post(
        test_app, "/v1/profiles/rex_model/compatibility", {"profile": "rex_manual"}
    )
    assert response.status_code == 200
    assert response.json() == {
        "profile": "rex_model",
        "other": "rex_manual",
        "score": "exact",
        "indicator": "✓",
    }


@pytest.mark.anyio
async def test_compatibility_against_phoneme_set(test_app):
    partial = await _post(
        test_app, "/v1/profiles/rex_model/compatibility", {"phoneme_set": ["a", "θ"]}
    )
    assert partial.json()["score"] == "partial"
    assert partial.json()["indicator"] == "~"

    none = await _post(
        test_app, "/v1/profiles/rex_model/compatibility", {"phoneme_set": ["θ", "ð"]}
    )
    assert none.json()["score"] == "incompatible"
    assert none.json()["indicator"] == "✗"


@pytest.mark.anyio
async def test_compatibility_requires_one_source(test_app):
    response = await _post(
        test_app,
        "/v1/profiles/rex_model/compatibility",
        {"profile": "rex_manual", "phoneme_set": ["a"]},
    )
    assert response.status_code == 400


@pytest.mark.anyio
async def test_compatibility_with_unknown_other_profile(test_app):
    response = await _post(
        test_app, "/v1/profiles/rex_model/compatibility", {"profile": "ghost"}
    )
    assert response.status_code == 404
    assert response.json()["profile"] == "ghost"


@pytest.mark.anyio
async def test_converter_compatibility_endpoint(test_app):
    response = await _post(
        test_app,
        "/v1/profiles/rex_model/converter-compatibility",
        {"supported_symbols": ["a", "k", "ts"]},
    )
    assert response.status_code == 200
    assert response.json() == {"profile": "rex_model", "level": "full", "indicator": "✓"}

    unknown = await _post(
        test_app, "/v1/profiles/rex_model/converter-compatibility", {}
    )
    assert unknown.json()["level"] == "unknown"


@pytest.mark.anyio
async def test_phoneme_reverse_lookup(test_app):
    response = await _get(test_app, "/v1/phonemes/sil/profiles")
    assert response.status_code == 200
    assert response.json() == {
        "symbol": "sil",
        "profiles": ["manual_en", "rex_manual", "rex_model"],
    }

    japanese_only = await _get(test_app, "/v1/phonemes/ɯ/profiles")
    assert japanese_only.json()["profiles"] == ["rex_manual", "rex_model"]
