"""API endpoints package."""

from . import health
from . import documents
from . import findings
from . import wizard
from . import chat

__all__ = ["health", "documents", "findings", "wizard", "chat"]
