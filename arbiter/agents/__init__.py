"""Agents module."""

from ..notification_bus import IAgent
from .agent import Agent

__all__ = ["Agent", "IAgent"]
