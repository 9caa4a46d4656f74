"""Application state shared by the API routers."""

from typing import Optional, Union

from papersift.config import Settings
from papersift.services.session import SearchSession
from papersift.services.transport import FileTransport, HttpTransport


# ============================================================================
# Global State
# ============================================================================


class AppState:
    """Mutable singleton holding the runtime services."""

    settings: Settings
    transport: Optional[Union[HttpTransport, FileTransport]] = None
    session: Optional[SearchSession] = None


state = AppState()


def get_session() -> SearchSession:
    """Return the live session (created in the app lifespan)."""
    if state.session is None:
        raise RuntimeError("Search session is not initialized")
    return state.session
