"""Services for the strategy consistency engine."""

from .claude_client import ClaudeClient, get_claude_client
from .file_storage import FileStorage, get_file_storage
from .text_responder import TemplateTextResponder, ClaudeTextResponder, get_text_responder
from .project_service import ProjectService, get_project_service

__all__ = [
    "ClaudeClient",
    "get_claude_client",
    "FileStorage",
    "get_file_storage",
    "TemplateTextResponder",
    "ClaudeTextResponder",
    "get_text_responder",
    "ProjectService",
    "get_project_service",
]
