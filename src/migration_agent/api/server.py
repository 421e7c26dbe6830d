import structlog
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from migration_agent import __version__
from migration_agent.api.jsonrpc import JsonRpcDispatcher
from migration_agent.api.routes import agent_card, health, rpc
from migration_agent.api.schemas.agent_card import build_agent_card
from migration_agent.application.pathways import PathwayGenerator
from migration_agent.application.task_processor import TaskProcessor
from migration_agent.core.interfaces.generator import PathwayGeneratorProtocol
from migration_agent.infrastructure.llm.llm_service import LLMService
from migration_agent.infrastructure.persistence.memory_task_store import InMemoryTaskStore
from migration_agent.settings import Settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI startup/shutdown events."""
    settings: Settings = app.state.settings

    if not app.state.api_key_configured:
        await logger.awarning(
            "fastapi.startup.api_key_missing",
            message="GEMINI_API_KEY environment variable not set; pathway generation will fail",
            hint="export GEMINI_API_KEY=your-api-key (https://aistudio.google.com/app/apikey)",
        )

    await logger.ainfo(
        "fastapi.startup",
        message="Migration Pathways Agent starting...",
        agent_card=f"{settings.public_url}/.well-known/agent.json",
        rpc_endpoint=f"{settings.public_url}/",
    )
    yield
    await logger.ainfo(
        "fastapi.shutdown",
        message="Migration Pathways Agent shutting down...",
        tasks=len(app.state.task_store),
    )


def create_app(
    settings: Optional[Settings] = None,
    generator: Optional[PathwayGeneratorProtocol] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Runtime settings (read from the environment if None)
        generator: Pathway generator override; the Gemini-backed generator
            is built from the LLM config when None
    """
    settings = settings or Settings()

    if generator is None:
        llm_service = LLMService(
            config_path=settings.llm_config_path,
            api_key=settings.gemini_api_key,
        )
        generator = PathwayGenerator(llm_service, model=settings.llm_model)
        api_key_configured = llm_service.has_api_key
    else:
        api_key_configured = True

    app = FastAPI(
        title="Migration Pathways Agent",
        description="A2A JSON-RPC agent for AI-generated migration pathways",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # One store per app, shared by processor and dispatcher
    task_store = InMemoryTaskStore()
    processor = TaskProcessor(store=task_store, generator=generator)

    app.state.settings = settings
    app.state.api_key_configured = api_key_configured
    app.state.task_store = task_store
    app.state.dispatcher = JsonRpcDispatcher(processor)
    app.state.agent_card = build_agent_card(settings.public_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    app.include_router(agent_card.router, tags=["discovery"])
    app.include_router(rpc.router, tags=["jsonrpc"])
    app.include_router(health.router, tags=["health"])

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = Settings()
    uvicorn.run(create_app(_settings), host=_settings.host, port=_settings.port)
