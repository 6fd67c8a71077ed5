import pytest
from pydantic import ValidationError

from config.settings import Settings
from report_engine.schemas import AnalysisVariant


def test_variant_is_parsed():
    assert Settings(ANALYSIS_VARIANT="energy").ANALYSIS_VARIANT == AnalysisVariant.ENERGY


def test_invalid_variant_is_rejected_at_startup():
    with pytest.raises(ValidationError):
        Settings(ANALYSIS_VARIANT="weather")


def test_blank_api_key_counts_as_missing():
    settings = Settings(ANTHROPIC_API_KEY="   ", OPENAI_API_KEY=" sk-test ")
    assert settings.api_key_for("anthropic") is None
    assert settings.api_key_for("openai") == "sk-test"
    assert settings.api_key_for("unknown") is None
