from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Clinic API"
    app_version: str = "0.1.0"
    app_env: str = "production"
    frontend_url: str = "http://localhost:3000"
    database_url: str = "sqlite:///./local.db"
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60
    log_level: str = "INFO"
    log_json: bool = False
    log_cache_loggers: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def debug(self) -> bool:
        return self.app_env.lower() == "development"


settings = Settings()
