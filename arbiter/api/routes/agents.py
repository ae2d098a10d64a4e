"""Agent API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application


class AgentCreateRequest(BaseModel):
    """Request model for registering an agent."""

    name: str


class AgentResponse(BaseModel):
    """Response model for an agent."""

    name: str
    state: str
    last_message: str
    holding: bool


class AccessResponse(BaseModel):
    """Response model for an access request."""

    granted: bool
    state: str
    message: str


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def _agent_view(app: Application, name: str) -> dict:
    agent = app.get_agent(name)
    return {
        "name": agent.name,
        "state": agent.state.value,
        "last_message": agent.last_message,
        "holding": app.service.current_holder is agent,
    }


def create_agents_router(app: Application) -> APIRouter:
    """Create agents router."""
    router = APIRouter(prefix="/api/agents", tags=["agents"])

    @router.post("", response_model=AgentResponse)
    async def create_agent(request: AgentCreateRequest) -> dict:
        """Construct an agent and register it with the service."""
        try:
            app.add_agent(request.name)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return _agent_view(app, request.name)

    @router.get("", response_model=list[AgentResponse])
    async def list_agents() -> list[dict]:
        """List agents in registration order."""
        return [_agent_view(app, agent.name) for agent in app.agents]

    @router.get("/{name}", response_model=AgentResponse)
    async def get_agent(name: str) -> dict:
        """Get one agent."""
        try:
            return _agent_view(app, name)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))

    @router.post("/{name}/request", response_model=AccessResponse)
    async def request_access(name: str) -> dict:
        """Have the agent request the resource."""
        try:
            agent = app.get_agent(name)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))

        try:
            granted = agent.request_resource()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return {
            "granted": granted,
            "state": agent.state.value,
            "message": agent.last_message,
        }

    @router.delete("/{name}", response_model=StatusResponse)
    async def remove_agent(name: str) -> dict:
        """Unregister the agent, releasing the resource if it holds it."""
        try:
            app.remove_agent(name)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {"status": "ok"}

    return router
