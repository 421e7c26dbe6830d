"""
Application Layer - Pathway Generator

Turns an extracted UserProfile into a migration pathway recommendation by
prompting the configured LLM. Every failure is raised as
PathwayGenerationError so the task processor can record it on the task.
"""

from typing import Optional

import structlog

from migration_agent.core.domain.errors import PathwayGenerationError
from migration_agent.core.domain.models import UserProfile
from migration_agent.core.prompts.pathway_prompt import build_pathway_prompt
from migration_agent.infrastructure.llm.llm_service import LLMService

logger = structlog.get_logger()


class PathwayGenerator:
    """LLM-backed implementation of PathwayGeneratorProtocol."""

    def __init__(self, llm_service: LLMService, model: Optional[str] = None):
        self.llm_service = llm_service
        self.model = model
        self.logger = logger.bind(component="pathway_generator")

    async def generate_pathways(self, profile: UserProfile) -> str:
        """
        Generate the single best migration pathway for a profile.

        Args:
            profile: Extracted profile, possibly all-empty

        Returns:
            Markdown recommendation text from the model

        Raises:
            PathwayGenerationError: If no API key is configured, the LLM call
                fails, or the model returns no text
        """
        if not self.llm_service.has_api_key:
            raise PathwayGenerationError("GEMINI_API_KEY environment variable not set")

        prompt = build_pathway_prompt(profile)
        self.logger.debug(
            "pathways.prompt.built",
            profession=profile.profession,
            destination=profile.destination,
            origin=profile.origin,
            budget=profile.budget,
            prompt_length=len(prompt),
        )

        result = await self.llm_service.complete(
            messages=[{"role": "user", "content": prompt}],
            model=self.model,
        )

        if not result.get("success"):
            raise PathwayGenerationError(
                f"failed to make API request: {result.get('error', 'unknown error')}"
            )

        content = (result.get("content") or "").strip()
        if not content:
            raise PathwayGenerationError("no response generated from API")

        return content
