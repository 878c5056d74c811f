"""LLM model abstraction for consistent model access across the application."""

from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider


def get_model(provider: str, model_name: str, api_key: str):
    if provider == "openai":
        return OpenAIChatModel(model_name, provider=OpenAIProvider(api_key=api_key))

    raise ValueError(f"Unsupported LLM provider: {provider}")
