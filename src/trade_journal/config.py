"""Settings (pydantic-settings, loaded from env vars)."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # --- Storage ---
    JOURNAL_PATH: str = "trade_journal.json"

    # --- Monte Carlo ---
    MONTE_CARLO_SIMULATIONS: int = 1000
    MONTE_CARLO_PERIODS: int = 100
    MONTE_CARLO_RISK_FRACTION: float = 0.01
    HISTOGRAM_BINS: int = 20
    MIN_SIMULATION_TRADES: int = 5

    # --- Journal defaults (first launch) ---
    DEFAULT_THEME: str = "dark"
    DEFAULT_STARTING_BALANCE: float = 0.0
    DEFAULT_SETUPS: list[str] = ["Breakout", "Pullback", "Reversal", "Range"]
    DEFAULT_SITUATIONS: list[str] = ["Trending", "Choppy", "News", "Gap"]
    DEFAULT_TAGS: list[str] = ["A+", "FOMO", "Revenge", "Early Exit", "Late Entry"]

    model_config = {"env_prefix": "", "case_sensitive": True}
