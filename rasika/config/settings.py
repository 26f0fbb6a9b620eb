import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=os.path.abspath(os.path.join(os.path.dirname(__file__), "../../.env")),
        extra="allow"
    )

    OPENAI_API_KEY: str
    OPENAI_API_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4.1-nano"
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "rasika"
    TMDB_API_KEY: str = ""
    TMDB_API_URL: str = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL: str = "https://image.tmdb.org/t/p/w500"
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # personalization bounds
    HISTORY_PERSONALIZATION_LIMIT: int = 20
    WATCHED_CONTENT_LIMIT: int = 10
    PAST_REQUESTS_LIMIT: int = 5
    REVIEWS_DEFAULT_LIMIT: int = 20

    @property
    def tmdb_enabled(self) -> bool:
        return bool(self.TMDB_API_KEY)


settings = Settings()
