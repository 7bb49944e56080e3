"""
Configuration Management for Household Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The engine itself is pure, but a handful of policy constants (the salary
category name, settlement tolerances, fallback category) are household
conventions rather than math, so they live here and can be overridden
through LEDGER_* environment variables or a .env file.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """Calculation engine policy settings."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Income reconciliation
    salary_category: str = Field(
        default="Salário",
        description="Income category that competes with recurring salaries"
    )
    legacy_salary_description: str = Field(
        default="Salário Base",
        description="Description used when synthesizing a legacy salary entry"
    )

    # Expense aggregation
    default_category: str = Field(
        default="Outros",
        description="Category used for expenses without one"
    )

    # Settlement thresholds
    household_tolerance: Decimal = Field(
        default=Decimal("0.009"),
        ge=0,
        description="Balance above which a household transfer is required"
    )
    trip_tolerance: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Balance above which a trip settlement is required"
    )

    # Goals
    strict_goal_references: bool = Field(
        default=False,
        description="Fail when a goal transaction references an unknown goal"
    )

    # Validation thresholds
    max_expense_value: Decimal = Field(
        default=Decimal("10000000"),
        description="Maximum reasonable expense value (for sanity checking)"
    )
    max_installments: int = Field(
        default=360,
        ge=1,
        description="Maximum number of installments accepted"
    )

    # Display
    currency_symbol: str = Field(
        default="R$",
        description="Currency symbol used by the display formatters"
    )

    @field_validator('salary_category', 'default_category')
    @classmethod
    def not_blank(cls, v: str) -> str:
        """Category names are matched literally, so they cannot be blank."""
        if not v.strip():
            raise ValueError("Category name cannot be blank")
        return v


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON (False renders for the console)"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}.
    Useful for startup checks.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.ledger
        results["ledger"] = True
    except Exception as e:
        results["ledger"] = False
        results["ledger_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
