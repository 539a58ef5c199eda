from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    demo_mode: bool = True

    # Environmental data providers
    soilgrids_url: str = "https://rest.isric.org/soilgrids/v2.0/properties/query"
    forecast_url: str = "https://api.open-meteo.com/v1/forecast"
    archive_url: str = "https://archive-api.open-meteo.com/v1/archive"
    http_timeout_seconds: float = 15.0
    user_agent: str = "forest-impact-simulator/0.1"

    # Years of archive data used for the climate trend
    historical_years: int = 10

    # Provider rate limiting (requests per window, per data source)
    rate_limit_requests: int = 10
    rate_limit_window_seconds: float = 60.0

    # Species mix percentages must sum to 100 within this tolerance
    mix_percentage_tolerance: float = 0.1
    # Looser tolerance used when deriving planting spacing for a mix
    spacing_percentage_tolerance: float = 5.0

    max_simulation_years: int = 100
    max_tree_age: int = 200

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
