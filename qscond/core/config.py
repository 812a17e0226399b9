from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="QSCOND_",
        case_sensitive=True,
        extra="ignore",
    )

    # Page size used when a row filter does not declare its own MAX_LIMIT.
    DEFAULT_MAX_LIMIT: int = 100

    ESCAPE_LIKE_WILDCARDS: bool = False
    LIKE_ESCAPE_CHAR: str = "\\"

    # Separator for single-valued `field[in]=a,b` parameters.
    LIST_SEPARATOR: str = ","


settings = Settings()
