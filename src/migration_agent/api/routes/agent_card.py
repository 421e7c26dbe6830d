"""Agent card discovery route."""

from fastapi import APIRouter, Request

from migration_agent.api.schemas.agent_card import AgentCard

router = APIRouter()


@router.get(
    "/.well-known/agent.json",
    response_model=AgentCard,
    response_model_by_alias=True,
    summary="Agent card",
)
async def get_agent_card(request: Request) -> AgentCard:
    return request.app.state.agent_card
