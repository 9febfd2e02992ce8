from typing import Dict, List, Optional
import logging

from models.session_models import SessionData
from services.dataset_reader_service import drop_dataset

logger = logging.getLogger(__name__)

# Sessions live as long as the API process
_SESSIONS: Dict[str, SessionData] = {}


def create_session(session_id: str, file_path: str, file_name: str, sheet_names: List[str]) -> SessionData:
    session = SessionData(
        session_id=session_id,
        file_path=file_path,
        file_name=file_name,
        sheet_names=sheet_names,
    )
    _SESSIONS[session_id] = session
    logger.info("Created session %s for %s", session_id, file_name)
    return session


def get_session(session_id: str) -> Optional[SessionData]:
    return _SESSIONS.get(session_id)


def drop_session(session_id: str) -> bool:
    session = _SESSIONS.pop(session_id, None)
    drop_dataset(session_id)
    return session is not None
