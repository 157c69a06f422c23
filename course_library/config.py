from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Application settings
    app_name: str = "Course Library API"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"

    # Paging settings
    default_page_size: int = 10
    max_page_size: int = 20

    # Sorting settings
    default_order_by: str = "name"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()
