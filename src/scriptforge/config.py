"""Configuration settings for ScriptForge."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ALLOWED_IMPORTS = (
    "math,json,re,datetime,statistics,itertools,functools,collections,"
    "random,string,decimal,fractions,textwrap,operator"
)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or overrides."""

    model_config = SettingsConfigDict(
        env_prefix="", case_sensitive=False, populate_by_name=True
    )

    workspace_dir: str = Field(default="./workspace", validation_alias="SCRIPTFORGE_WORKSPACE_DIR")
    scripts_dir: str | None = Field(default=None, validation_alias="SCRIPTFORGE_SCRIPTS_DIR")
    script_timeout_seconds: float = Field(
        default=5.0, gt=0, le=120, validation_alias="SCRIPTFORGE_SCRIPT_TIMEOUT_SECONDS"
    )
    allowed_imports: str = Field(
        default=DEFAULT_ALLOWED_IMPORTS, validation_alias="SCRIPTFORGE_ALLOWED_IMPORTS"
    )
    max_steps: int = Field(default=20, ge=1, validation_alias="SCRIPTFORGE_MAX_STEPS")
    log_level: str = Field(default="INFO", validation_alias="SCRIPTFORGE_LOG_LEVEL")

    def allowed_import_set(self) -> set[str]:
        return {item.strip() for item in self.allowed_imports.split(",") if item.strip()}


DEFAULT_SETTINGS = Settings()
