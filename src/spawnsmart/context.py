"""Application context — builds each service once and hands them to consumers."""

from __future__ import annotations

import logging

from spawnsmart.advice.advisor import CultivationAdvisor
from spawnsmart.advice.recommendations import RecommendationService
from spawnsmart.calculator.user_data import UserDataStore
from spawnsmart.cms.transport import ContentfulTransport
from spawnsmart.content.resolver import ContentResolver, StepCallback
from spawnsmart.schemas.config import AppConfig
from spawnsmart.shared.openai_client import DryRunClient, OpenAIClient

logger = logging.getLogger(__name__)


class AppContext:
    """Owns the transport, resolver, advice services and calculator state."""

    def __init__(
        self,
        config: AppConfig,
        transport: ContentfulTransport,
        resolver: ContentResolver,
        client: OpenAIClient | DryRunClient | None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.resolver = resolver
        self.client = client
        self.advisor = CultivationAdvisor(client, resolver)
        self.recommendations = RecommendationService(
            client,
            max_requests=config.recommendations.max_requests,
            min_interval=config.recommendations.min_interval_seconds,
        )
        self.user_data = UserDataStore(config.state_path)

    @classmethod
    def create(
        cls,
        config: AppConfig,
        *,
        dry_run: bool = False,
        on_step: StepCallback | None = None,
    ) -> "AppContext":
        cms = config.contentful
        transport = ContentfulTransport(
            cms.space_id, cms.access_token, environment=cms.environment, base_url=cms.base_url,
        )
        if not cms.configured:
            logger.info("Contentful credentials not set; serving built-in content only")
        resolver = ContentResolver(transport, on_step=on_step)

        client: OpenAIClient | DryRunClient | None
        if dry_run:
            client = DryRunClient()
        elif config.openai.api_key:
            client = OpenAIClient(
                config.openai.api_key,
                model=config.openai.model,
                temperature=config.openai.temperature,
                max_tokens=config.openai.max_tokens,
            )
        else:
            logger.info("No OpenAI API key; AI features fall back to static content")
            client = None
        return cls(config, transport, resolver, client)

    async def __aenter__(self) -> "AppContext":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()
