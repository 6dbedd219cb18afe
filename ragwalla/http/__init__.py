"""HTTP module."""

from .agents import AgentsResource
from .client import HTTPClient

__all__ = ["AgentsResource", "HTTPClient"]
