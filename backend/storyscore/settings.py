from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	# Database holding the persisted progress log
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
	# Progress store backend can be "sql" (SQLAlchemy) or "memory" (process lifetime only)
	progress_store: str = Field(default="sql", validation_alias="PROGRESS_STORE")

	# Google Cloud Speech-to-Text
	speech_enabled: bool = Field(default=True, validation_alias="SPEECH_ENABLED")
	speech_language_code: str = Field(default="en-US", validation_alias="SPEECH_LANGUAGE_CODE")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
