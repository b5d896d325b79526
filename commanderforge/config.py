from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "CommanderForge"
    debug: bool = False

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "CommanderForge/0.2"

    # Response cache for Scryfall lookups
    cache_dir: str = ".cache/scryfall"
    cache_max_age_days: int = 14

    # Scryfall asks for 50-100ms between requests; stay a little above that
    request_interval_seconds: float = 0.13
    request_timeout_seconds: float = 30.0

    simulation_trials: int = 20000
    simulation_seed: int = 12345


settings = Settings()


# =============================================================================
# DECK CONSTRUCTION LIMITS
# =============================================================================

# Commander mainboard size (the commander itself is the 100th card)
MAINBOARD_SIZE = 99

# Seed used when the caller passes 0 / no seed
DEFAULT_SEED = 12345

# Candidate fetch cap: default, and the clamp applied to user input
DEFAULT_MAX_CANDIDATES = 800
MIN_MAX_CANDIDATES = 200
MAX_MAX_CANDIDATES = 2500
