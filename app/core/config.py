from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://pulse:pulse@db:5432/pulse"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Bearer token required by the risk-prediction endpoints. Empty disables the check.
    API_TOKEN: str = ""

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://dashboard.college.edu,https://mentor.college.edu"
    CORS_ORIGINS: str = "*"

    # OpenAI-compatible chat completions gateway used for risk explanations.
    AI_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    AI_GATEWAY_API_KEY: str = ""
    AI_MODEL: str = "google/gemini-2.5-flash"
    AI_TIMEOUT_SECONDS: float = 10.0

    # Academic-records (ERP) API
    ERP_BASE_URL: str = "https://kemwxuuazkkxsddexscx.supabase.co/functions/v1"
    ERP_TIMEOUT_SECONDS: float = 10.0

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
