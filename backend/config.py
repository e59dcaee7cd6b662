import os
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseSettings):
    # O*NET Web Services
    onet_api_key: str = ""
    onet_base_url: str = "https://api-v2.onetcenter.org"
    onet_timeout_seconds: float = 10.0
    onet_retries: int = 2
    onet_backoff_seconds: float = 1.0
    onet_rate_limit_ms: int = 150
    onet_response_cache_dir: str = "data/onet-cache"
    onet_response_cache_ttl_days: int = 30

    # Skill cache + job data
    skills_cache_path: str = "data/onet-skills-cache.json"
    jobs_path: str = "data/jobs.json"

    # Fuzzy matching (empirical values, tune per domain)
    match_threshold: float = 0.35
    priority_boost: float = 1.3
    max_occupations: int = 8
    early_exit_score: float = 0.85

    # Description restructuring
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    cors_origins: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
    debug: bool = False
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
