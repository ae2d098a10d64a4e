"""Arbitration module."""

from .service import (
    FREE_MESSAGE,
    GRANTED_MESSAGE,
    ArbitrationService,
    IArbitrationService,
)

__all__ = [
    "ArbitrationService",
    "IArbitrationService",
    "FREE_MESSAGE",
    "GRANTED_MESSAGE",
]
