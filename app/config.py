from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Google Programmable Search (live events)
    google_pse_api_key: str = ""
    google_pse_engine_id: str = "826b8f8b020fa46af"
    google_pse_base_url: str = "https://www.googleapis.com/customsearch/v1"
    live_search_page_size: int = 5
    search_timeout_sec: float = 15.0

    # OpenAI-compatible completion gateway
    completion_api_key: str = ""
    completion_base_url: str = "https://ai.gateway.lovable.dev/v1"
    completion_model: str = "google/gemini-2.5-flash"
    completion_max_tokens: int = 4096
    completion_timeout_sec: float = 45.0

    # TMDB
    tmdb_api_key: str = ""
    tmdb_base_url: str = "https://api.themoviedb.org/3"
    tmdb_timeout_sec: float = 15.0
    tmdb_max_results: int = 20
    tmdb_max_parallel_requests: int = 8
    default_region: str = "US"

    # App
    cors_origins: str = "*"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
