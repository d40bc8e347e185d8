from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from profile_registry.profiles.loader import BUNDLED_PROFILES_DIR


class Settings(BaseSettings):
    """
    Centralized application settings leveraging environment overrides.
    """

    app_name: str = "Phoneme Profile Registry"
    environment: str = Field("local", validation_alias="ENVIRONMENT")
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field("INFO", description="Level for the profile_registry logger")

    # Profile loading
    profiles_dir: Path = Field(
        BUNDLED_PROFILES_DIR, description="Directory of YAML/JSON profile files"
    )
    strict_model_files: bool = Field(
        True,
        description="Reject model-driven profiles without model_file instead of warning",
    )
    seal_on_startup: bool = Field(True, description="Seal the registry once loaded")

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
