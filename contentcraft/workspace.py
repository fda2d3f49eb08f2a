"""Per-session SelectionController registry behind the /workspace API."""
import uuid
from typing import Dict, Optional

from contentcraft.controller import SelectionController
from contentcraft.logging_config import get_logger
from contentcraft.stores import Stores

logger = get_logger(__name__)

MAX_SESSIONS = 1000


class WorkspaceRegistry:
    """
    One controller per session id. Oldest sessions are evicted beyond
    `max_sessions`; an evicted session simply starts over on next access.
    """

    def __init__(self, stores: Stores, max_sessions: int = MAX_SESSIONS) -> None:
        self.stores = stores
        self.max_sessions = max_sessions
        self._controllers: Dict[str, SelectionController] = {}

    def __len__(self) -> int:
        return len(self._controllers)

    @staticmethod
    def new_session_id() -> str:
        return str(uuid.uuid4())

    def get(self, session_id: str) -> Optional[SelectionController]:
        return self._controllers.get(session_id)

    async def open(self, session_id: str) -> SelectionController:
        """Controller for session_id, created and started on first use."""
        controller = self._controllers.get(session_id)
        if controller is None:
            while len(self._controllers) >= self.max_sessions:
                evicted = next(iter(self._controllers))
                del self._controllers[evicted]
                logger.info("workspace.session_evicted", session_id=evicted)
            controller = SelectionController(self.stores)
            self._controllers[session_id] = controller
            logger.info("workspace.session_opened", session_id=session_id)
        await controller.start()
        return controller

    def close(self, session_id: str) -> bool:
        return self._controllers.pop(session_id, None) is not None
