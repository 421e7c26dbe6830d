"""
Migration Pathway Prompt

Prompt template sent to the LLM for a single migration pathway
recommendation. Profile fields that were not extracted are omitted from the
USER PROFILE block and the model is told to proceed on assumptions.
"""

from migration_agent.core.domain.models import UserProfile

PATHWAY_PROMPT_HEADER = """You are a migration planning expert. Provide personalized migration pathway recommendations in a well-structured markdown format.

CRITICAL BEHAVIOR RULES:
- Never ask the user for additional information.
- If any profile fields are missing (profession, origin, destination, budget), proceed with best available information and reasonable assumptions.
- Output exactly one best migration option. Do not include follow-up questions.

USER PROFILE:
"""

PATHWAY_PROMPT_INSTRUCTIONS = """
INSTRUCTIONS:
Research and provide the SINGLE most suitable migration pathway for this profile. If some fields are missing, infer typical constraints for 2024–2025 and proceed without asking questions. Format as follows:

# Best Migration Option: [Visa Name]

Brief overview of why this is the best option for the profile (1-2 sentences).

**Key Details:**
- Processing time: [Duration]
- Cost: [USD range]
- Success rate: [High/Medium/Low]
- Main requirements: [2-3 key points]

Next step: [Most important action to take]

IMPORTANT: Be concise. Focus on 2024-2025 requirements. Consider budget constraints. Do not ask for more details.

Generate the response now:"""


def build_pathway_prompt(profile: UserProfile) -> str:
    """Assemble the full prompt for the given profile."""
    lines = []
    if profile.profession:
        lines.append(f"- Profession: {profile.profession}\n")
    if profile.origin:
        lines.append(f"- Current Country: {profile.origin}\n")
    if profile.destination:
        lines.append(f"- Destination Country: {profile.destination}\n")
    if profile.budget > 0:
        lines.append(f"- Budget: ${profile.budget} USD\n")

    return PATHWAY_PROMPT_HEADER + "".join(lines) + PATHWAY_PROMPT_INSTRUCTIONS
