"""Hosted model adapters."""
from report_engine.providers.base import AnalysisProvider, InlinePart, Part, TextPart

# provider name -> env var holding its API key
PROVIDER_ENV_VARS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


def create_provider(name: str, api_key: str, model: str, max_tokens: int = 8192) -> AnalysisProvider:
    """Build the adapter for ``name``. SDKs are imported lazily so only the chosen one loads."""
    if name == "anthropic":
        from report_engine.providers.anthropic_provider import AnthropicProvider
        return AnthropicProvider(api_key=api_key, model=model, max_tokens=max_tokens)
    if name == "openai":
        from report_engine.providers.openai_provider import OpenAIProvider
        return OpenAIProvider(api_key=api_key, model=model)
    if name == "gemini":
        from report_engine.providers.gemini_provider import GeminiProvider
        return GeminiProvider(api_key=api_key, model=model)
    raise ValueError(f"Unknown analysis provider: {name!r}. Use one of {sorted(PROVIDER_ENV_VARS)}")


__all__ = ["AnalysisProvider", "InlinePart", "Part", "TextPart", "PROVIDER_ENV_VARS", "create_provider"]
