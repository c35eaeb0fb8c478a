"""Application configuration loaded from environment and config files."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """LLM provider configuration."""

    model_config = {"env_prefix": "PCNWIZARD_LLM_"}

    provider: str = "ollama"
    base_url: str = "http://localhost:11434"
    model: str = "llava:13b"
    api_key: str | None = None
    timeout_seconds: int = 60
    max_retries: int = 1
    max_tokens: int = 2048
    top_p: float | None = None
    temperature: float = 0.1


class WizardConfig(BaseSettings):
    """Thresholds and bounds enforced by the wizard gates and router."""

    model_config = {"env_prefix": "PCNWIZARD_WIZARD_"}

    confidence_threshold: float = 0.4
    max_explanation_words: int = 500
    min_grounds: int = 1
    max_grounds: int = 3
    preview_lines: int = 5
    support_email: str = "support@defens.co.uk"
    grounds_path: str | None = None


class PaymentConfig(BaseSettings):
    """Checkout redirect configuration."""

    model_config = {"env_prefix": "PCNWIZARD_PAYMENT_"}

    checkout_url: str = "https://buy.stripe.com/00w8wQ1lggCXayYgy1ebu0a"
    return_param: str = "payment"
    success_value: str = "success"
    require_payment: bool = True


class StorageConfig(BaseSettings):
    """Local persistence for surviving the payment redirect."""

    model_config = {"env_prefix": "PCNWIZARD_STORAGE_"}

    data_dir: str = "data/cases"
    state_key: str = "pcn_processing_state"


class Settings(BaseSettings):
    """Root application settings."""

    model_config = {"env_prefix": "PCNWIZARD_"}

    log_level: str = "INFO"
    session_idle_minutes: int = 120

    llm: LLMConfig = Field(default_factory=LLMConfig)
    wizard: WizardConfig = Field(default_factory=WizardConfig)
    payment: PaymentConfig = Field(default_factory=PaymentConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
