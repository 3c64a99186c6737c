"""Application configuration settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EXTRACTION_PROMPT = """Return the value that is in the water or gas register, in this pattern:
{
    "value": "VALUE",
}"""


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
    )

    PROJECT_NAME: str = "Meter Reader"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    DATABASE_URL: str = "sqlite:///./meter_reader.db"

    # Extraction collaborator (Google Gemini)
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-2.0-flash"
    EXTRACTION_PROMPT: str = DEFAULT_EXTRACTION_PROMPT

    # Media storage is not implemented; every reading gets this reference
    IMAGE_URL_PLACEHOLDER: str = "url_image"


settings = Settings()
