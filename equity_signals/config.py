"""Runtime settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from equity_signals.models.config import IndicatorConfig


class Settings(BaseSettings):
    """Engine settings loaded from ``EQUITY_SIGNALS_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="EQUITY_SIGNALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Indicator periods
    rsi_period: int = 14
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9
    kd_period: int = 9
    bollinger_period: int = 20
    bollinger_width: float = 2.0
    vwap_period: int = 20
    atr_period: int = 14
    dmi_period: int = 14
    williams_period: int = 14
    min_history: int = 20

    # Screener
    screen_limit: int = 50
    rsi_oversold_threshold: float = 30

    # Days without new data before a daily dataset is reported stale
    stale_days: int = 5

    def indicator_config(self) -> IndicatorConfig:
        return IndicatorConfig(
            rsi_period=self.rsi_period,
            macd_fast=self.macd_fast,
            macd_slow=self.macd_slow,
            macd_signal=self.macd_signal,
            kd_period=self.kd_period,
            bollinger_period=self.bollinger_period,
            bollinger_width=self.bollinger_width,
            vwap_period=self.vwap_period,
            atr_period=self.atr_period,
            dmi_period=self.dmi_period,
            williams_period=self.williams_period,
            min_history=self.min_history,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
