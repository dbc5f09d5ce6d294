"""Configuration schema using Pydantic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SearchEngine = Literal["local", "brave", "tavily", "exa", "perplexity"]


class Base(BaseModel):
    """Base model that accepts both camelCase and snake_case keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocalSearchConfig(Base):
    """Hidden-browser search configuration."""

    browser: Literal["chromium", "firefox"] = "chromium"
    headless: bool = True
    timeout_ms: int = Field(default=15000, ge=1000, le=120000)
    engine: Literal["google", "bing", "duckduckgo"] = "google"
    candidate_cap: int = Field(default=10, ge=1, le=50)
    user_agent: str = ""  # empty = sanitized browser default
    allow_private_network: bool = False
    block_file_scheme: bool = True
    auto_install_browsers: bool = True


class SearchProviderConfig(Base):
    """Remote search API credentials."""

    api_key: str = ""
    base_url: str = ""


class SearchProvidersConfig(Base):
    brave: SearchProviderConfig = Field(default_factory=SearchProviderConfig)
    tavily: SearchProviderConfig = Field(default_factory=SearchProviderConfig)
    exa: SearchProviderConfig = Field(default_factory=SearchProviderConfig)
    perplexity: SearchProviderConfig = Field(default_factory=SearchProviderConfig)


class WebSearchConfig(Base):
    """Web search configuration."""

    enabled: bool = True
    engine: SearchEngine = "local"
    max_results: int = Field(default=5, ge=1, le=20)
    content_length: int = Field(default=0, ge=0)  # 0 = no truncation
    titles_only: bool = False
    local: LocalSearchConfig = Field(default_factory=LocalSearchConfig)
    providers: SearchProvidersConfig = Field(default_factory=SearchProvidersConfig)


class Config(Base):
    """Root configuration for nanosearch."""

    search: WebSearchConfig = Field(default_factory=WebSearchConfig)
