"""
Pathway Generator Protocol

Contract between the task processor and whatever produces the
recommendation text for a profile. Implementations raise
PathwayGenerationError with a message suitable for a task status.
"""

from typing import Protocol

from migration_agent.core.domain.models import UserProfile


class PathwayGeneratorProtocol(Protocol):
    """Produces migration pathway text for an extracted user profile."""

    async def generate_pathways(self, profile: UserProfile) -> str:
        """
        Generate a recommendation for the profile.

        Raises:
            PathwayGenerationError: If the backing LLM call fails
        """
        ...
