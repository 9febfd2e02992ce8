from typing import List
from pydantic import BaseModel, Field


class SessionData(BaseModel):
    session_id: str
    file_path: str
    file_name: str
    sheet_names: List[str] = Field(default_factory=list)
