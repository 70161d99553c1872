from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Recovery Companion"
    env: str = "dev"
    api_prefix: str = "/api"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./recovery_companion.db"

    jwt_secret: str = "CHANGE_ME"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 30

    frontend_origin: str = "http://localhost:3000"

    # Assistant provider: "local" | "openai" | "groq"
    ai_provider: str = "local"
    ai_temperature: float = 0.7
    ai_max_tokens: int = 512
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    groq_api_key: str = ""
    groq_model: str = "llama-3.3-70b-versatile"

    trend_window_days: int = 7
    seed_demo_data: bool = True


settings = Settings()
