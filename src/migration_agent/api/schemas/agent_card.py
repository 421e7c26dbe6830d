"""
Agent Card
==========

Static capability-discovery document served at ``/.well-known/agent.json``.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from migration_agent import __version__


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Capabilities(_CamelModel):
    streaming: bool = False
    push_notifications: bool = False
    state_transition_history: bool = False


class Skill(_CamelModel):
    id: str
    name: str
    description: str
    tags: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)


class AgentCard(_CamelModel):
    name: str
    description: str
    url: str
    version: str
    capabilities: Capabilities = Field(default_factory=Capabilities)
    default_input_modes: list[str] = Field(default_factory=lambda: ["text", "text/plain"])
    default_output_modes: list[str] = Field(default_factory=lambda: ["text", "text/plain"])
    skills: list[Skill] = Field(default_factory=list)


PATHWAYS_SKILL = Skill(
    id="get_migration_pathways",
    name="Get AI-Generated Migration Pathways",
    description=(
        "Provides real-time, AI-generated migration pathways based on profession, "
        "destination country, origin, and budget using Google's Gemini LLM"
    ),
    tags=["migration", "visa", "relocation", "immigration", "ai-powered", "real-time"],
    examples=[
        "I'm a software engineer from Nigeria, want to move to Canada, budget $5000",
        "Data scientist looking to relocate to USA",
        "How can I migrate to Germany as a software developer?",
        "What are my options to move to Australia as an engineer with $10k budget?",
        "Nurse from India wanting to move to UK",
        "Teacher relocating from Philippines to Canada",
    ],
)


def build_agent_card(url: str) -> AgentCard:
    """Build the agent card advertised at ``url``."""
    return AgentCard(
        name="Migration Pathways Agent",
        description=(
            "An AI-powered agent that provides real-time, personalized migration "
            "pathway recommendations using Gemini LLM. Get current visa options, "
            "costs, requirements, and success probabilities based on your profile "
            "and destination country."
        ),
        url=url,
        version=__version__,
        skills=[PATHWAYS_SKILL],
    )
