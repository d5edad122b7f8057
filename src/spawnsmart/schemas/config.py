"""Configuration schema — validates spawnsmart.yml."""

from pathlib import Path

from pydantic import BaseModel, model_validator


class ContentfulSettings(BaseModel):
    """Delivery API credentials. Both must be set for CMS reads to happen."""

    space_id: str = ""
    access_token: str = ""
    environment: str = "master"
    base_url: str = "https://cdn.contentful.com"

    @property
    def configured(self) -> bool:
        return bool(self.space_id and self.access_token)


class OpenAISettings(BaseModel):
    api_key: str = ""
    model: str = "gpt-4o"
    temperature: float = 0.7
    max_tokens: int = 1000

    @model_validator(mode="after")
    def check_sampling(self) -> "OpenAISettings":
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"openai.temperature must be between 0 and 2, got {self.temperature}")
        if self.max_tokens <= 0:
            raise ValueError("openai.max_tokens must be positive")
        return self


class RecommendationSettings(BaseModel):
    """Client-side limits on AI recommendation requests."""

    max_requests: int = 3
    min_interval_seconds: float = 5.0


class AppConfig(BaseModel):
    """Top-level configuration loaded from spawnsmart.yml and the environment.

    Every section is optional: with no CMS credentials the resolver serves
    fallback content, and with no OpenAI key the advice features fall back
    to static text.
    """

    contentful: ContentfulSettings = ContentfulSettings()
    openai: OpenAISettings = OpenAISettings()
    recommendations: RecommendationSettings = RecommendationSettings()

    # Saved calculator inputs
    state_file: str = "~/.spawnsmart/calculator.json"

    @property
    def state_path(self) -> Path:
        return Path(self.state_file).expanduser()
