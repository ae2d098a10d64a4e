"""Document lifecycle API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import Application
from ...errors import InvalidTransitionError


class DocumentCreateRequest(BaseModel):
    """Request model for creating a document."""

    doc_id: str


class DocumentResponse(BaseModel):
    """Response model for a document."""

    doc_id: str
    state: str
    message: str


def create_documents_router(app: Application) -> APIRouter:
    """Create documents router."""
    router = APIRouter(prefix="/api/documents", tags=["documents"])

    @router.post("", response_model=DocumentResponse)
    async def create_document(request: DocumentCreateRequest) -> dict:
        """Create a document in draft."""
        try:
            document = app.add_document(request.doc_id)
        except ValueError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return {
            "doc_id": document.doc_id,
            "state": document.state.value,
            "message": document.last_message,
        }

    @router.post("/{doc_id}/{event}", response_model=DocumentResponse)
    async def apply_event(doc_id: str, event: str) -> dict:
        """Apply a lifecycle event (publish, reject)."""
        try:
            document = app.apply_document_event(doc_id, event)
        except KeyError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except InvalidTransitionError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {
            "doc_id": document.doc_id,
            "state": document.state.value,
            "message": document.last_message,
        }

    return router
