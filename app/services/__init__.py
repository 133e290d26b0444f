"""Services for the proposal wizard.

# Note: proposal_workflow는 레이어 모듈을 사용하므로 여기서 import 하지 않습니다.
# Use: from app.services.proposal_workflow import get_proposal_workflow
"""

from .claude_client import ClaudeClient, get_claude_client
from .image_fetcher import FetchedImage, ImageFetcher
from .state_store import (
    FileStateStore,
    InMemoryStateStore,
    StateStore,
    get_state_store,
    set_state_store,
)

__all__ = [
    "ClaudeClient",
    "get_claude_client",
    "FetchedImage",
    "ImageFetcher",
    "FileStateStore",
    "InMemoryStateStore",
    "StateStore",
    "get_state_store",
    "set_state_store",
]
