"""Control API routes: reset and the landing-scenario simulator."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from sim import ISim

from ...app import IApplication


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


# Wired by main before the server starts
_sim_instance: ISim | None = None


def set_sim_instance(sim: ISim | None) -> None:
    """Set the simulator driven by /sim/start and /sim/stop."""
    global _sim_instance
    _sim_instance = sim


def get_sim_instance() -> ISim | None:
    """Get the configured simulator, if any."""
    return _sim_instance


def _require_sim() -> ISim:
    if _sim_instance is None:
        raise HTTPException(status_code=404, detail="SIM not configured")
    return _sim_instance


def create_control_router(app: IApplication) -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api/control", tags=["control"])

    @router.post("/reset", response_model=StatusResponse)
    async def reset_system() -> dict:
        """Drop all agents, documents and trace data."""
        try:
            await app.reset()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {"status": "ok"}

    @router.post("/sim/start", response_model=StatusResponse)
    async def start_sim() -> dict:
        """Start the landing scenario."""
        sim = _require_sim()
        try:
            await sim.start()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {"status": "ok"}

    @router.post("/sim/stop", response_model=StatusResponse)
    async def stop_sim() -> dict:
        """Stop the landing scenario."""
        sim = _require_sim()
        try:
            await sim.stop()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        return {"status": "ok"}

    return router
