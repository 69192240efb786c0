"""
Scoring Settings for the TrustFlow Trust Score Engine.

This module contains all configurable parameters for the trust scoring
algorithm. They can be adjusted via environment variables when tuning the
score against observed default rates.

Environment variables use the TRUST_ prefix:
    TRUST_BASE_SCORE=50
    TRUST_WEIGHT_SELLER_HISTORY=40
    TRUST_BUYER_LATE_PENALTY_STEP=5

Usage:
    from trustflow.service.scoring.settings import trust_scoring_settings

    # Use default settings (loaded from env)
    base = trust_scoring_settings.base_score

    # Or create custom settings for testing
    custom = TrustScoringSettings(penalty_severe_late_count=5)
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TrustScoringSettings(BaseSettings):
    """
    Configurable parameters for the trust score algorithm.

    All settings can be overridden via environment variables with TRUST_ prefix.
    Factor weights are points out of 100 added on top of the base score.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRUST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    base_score: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Score every computation starts from before factors are added",
    )

    # === Factor Weights ===
    weight_seller_history: int = Field(
        default=40,
        ge=0,
        le=100,
        description="Maximum points for the seller's past success rate",
    )
    weight_buyer_reputation: int = Field(
        default=25,
        ge=0,
        le=100,
        description="Maximum points for the buyer's reputation",
    )
    weight_invoice_size: int = Field(
        default=20,
        ge=0,
        le=100,
        description="Maximum points for invoice size consistency",
    )
    weight_penalties: int = Field(
        default=15,
        ge=0,
        le=100,
        description="Maximum points for a clean late-payment record",
    )

    # === Neutral Defaults ===
    neutral_seller_history: float = Field(
        default=20,
        ge=0,
        description="Seller history points for a new or unknown seller",
    )
    neutral_invoice_size: float = Field(
        default=10,
        ge=0,
        description="Size consistency points when the seller has no raised volume",
    )
    neutral_penalties: float = Field(
        default=7.5,
        ge=0,
        description="Penalty points when late payments could not be counted",
    )
    default_reputation_score: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Reputation assumed for a buyer without history",
    )

    # === Invoice Size Tiers ===
    size_deviation_close: float = Field(
        default=0.2,
        gt=0.0,
        description="Deviation from the seller's average below this earns full points",
    )
    size_deviation_moderate: float = Field(
        default=0.5,
        gt=0.0,
        description="Deviation below this earns moderate points",
    )
    size_deviation_far: float = Field(
        default=1.0,
        gt=0.0,
        description="Deviation below this earns low points; above earns the minimum",
    )
    size_points_close: float = Field(default=20, ge=0)
    size_points_moderate: float = Field(default=15, ge=0)
    size_points_far: float = Field(default=10, ge=0)
    size_points_outlier: float = Field(default=5, ge=0)

    # === Penalty Tiers ===
    penalty_severe_late_count: int = Field(
        default=3,
        ge=1,
        description="Late payment count from which the severe tier applies",
    )
    penalty_points_clean: float = Field(default=15, ge=0)
    penalty_points_moderate: float = Field(default=10, ge=0)
    penalty_points_severe: float = Field(default=5, ge=0)

    # === Buyer Reputation ===
    buyer_late_penalty_step: int = Field(
        default=5,
        ge=0,
        le=100,
        description="Reputation points a buyer loses per late payment",
    )

    @model_validator(mode="after")
    def validate_weights(self) -> "TrustScoringSettings":
        """Factor weights must add up to 100 and tiers must be ordered."""
        total = (
            self.weight_seller_history
            + self.weight_buyer_reputation
            + self.weight_invoice_size
            + self.weight_penalties
        )
        if total != 100:
            raise ValueError(f"Factor weights must sum to 100, got {total}")
        if not (
            self.size_deviation_close
            < self.size_deviation_moderate
            < self.size_deviation_far
        ):
            raise ValueError("Size deviation tiers must be strictly increasing")
        return self

    @property
    def size_tiers(self) -> list[tuple[Decimal, float]]:
        """(upper deviation bound, points) pairs, tightest first."""
        return [
            (Decimal(str(self.size_deviation_close)), self.size_points_close),
            (Decimal(str(self.size_deviation_moderate)), self.size_points_moderate),
            (Decimal(str(self.size_deviation_far)), self.size_points_far),
        ]


@lru_cache
def get_trust_scoring_settings() -> TrustScoringSettings:
    """Get cached scoring settings instance."""
    return TrustScoringSettings()


trust_scoring_settings = get_trust_scoring_settings()
