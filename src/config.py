"""Application configuration using Pydantic Settings."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from models import Algorithm


class Settings(BaseSettings):
    """Settings for the command-line host; every field can come from KINSHIP_* env vars."""

    model_config = SettingsConfigDict(
        env_prefix="KINSHIP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    db_path: Path = Path("family_tree.db")
    default_algorithm: Algorithm = Algorithm.BFS
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


def get_settings() -> Settings:
    return Settings()
