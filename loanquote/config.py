from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # UI session persistence
    SESSION_FILE: str = Field(default="session_data.json")

    # Export
    PDF_TITLE: str = Field(default="Loan Scenario Summary")

    model_config = SettingsConfigDict(
        env_prefix="LOANQUOTE_",
        case_sensitive=False,
        extra="ignore",
    )


config = AppConfig()
