from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from carereport.merge.record_merger import DuplicatePolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = Field(default="CareReport API", alias="APP_NAME")
    app_env: str = Field(default="local", alias="APP_ENV")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    upload_dir: str = Field(default="/tmp/carereport/uploads", alias="UPLOAD_DIR")
    upload_max_file_size_mb: int = Field(default=20, alias="UPLOAD_MAX_FILE_SIZE_MB")
    evaluation_duplicate_policy: DuplicatePolicy = Field(
        default=DuplicatePolicy.LAST_ROW,
        alias="EVALUATION_DUPLICATE_POLICY",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
