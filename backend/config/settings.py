from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    perplexity_api_key: str = ""
    perplexity_api_url: str = "https://api.perplexity.ai/chat/completions"
    perplexity_model: str = "sonar-pro"
    research_temperature: float = 0.2
    research_timeout_seconds: float = 60.0
    research_api_url: str = "http://localhost:8000"
    cache_path: str = ".roi_research_cache.json"
    audit_log_limit: int = 500
    cors_origins: list[str] = ["http://localhost:3000"]
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
