"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from budgetme_insights.domain.rules import RuleThresholds


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "budgetme-insights"
    log_level: str = "INFO"

    # Transaction dates are read in the product's home timezone
    timezone: str = "Asia/Manila"

    # Display caps
    insight_limit: int = 4
    trend_limit: int = 4

    # Feed freshness
    tip_probability: float = 0.3
    trend_jitter: bool = True

    # Rule thresholds (share of total expenses or of transaction count)
    round_number_share: float = 0.30
    impulse_day_share: float = 0.15
    heavy_day_share: float = 0.10

    def rule_thresholds(self) -> RuleThresholds:
        """Thresholds handed to the rule engine"""
        return RuleThresholds(
            round_number_share=self.round_number_share,
            impulse_day_share=self.impulse_day_share,
            heavy_day_share=self.heavy_day_share,
            tip_probability=self.tip_probability,
        )


settings = Settings()
