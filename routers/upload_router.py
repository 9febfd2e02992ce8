import uuid
from fastapi import APIRouter, UploadFile, File, HTTPException

from services.file_upload_service import discard_uploaded_file, save_uploaded_file
from services.dataset_reader_service import load_dataset_for_session
from services.session_service import create_session, drop_session, get_session

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/dataset")
async def upload_dataset(file: UploadFile = File(...)):
    try:
        file_path = save_uploaded_file(file)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session_id = uuid.uuid4().hex

    try:
        sheet_infos = load_dataset_for_session(session_id, file_path, file.filename)
    except ValueError as e:
        discard_uploaded_file(file_path)
        raise HTTPException(status_code=400, detail=str(e))

    create_session(
        session_id=session_id,
        file_path=file_path,
        file_name=file.filename,
        sheet_names=[s.sheet_name for s in sheet_infos],
    )

    return {
        "session_id": session_id,
        "file_name": file.filename,
        "sheets": [s.model_dump() for s in sheet_infos],
    }


@router.delete("/dataset/{session_id}")
async def close_dataset(session_id: str):
    session = get_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found.")

    drop_session(session_id)
    discard_uploaded_file(session.file_path)
    return {"session_id": session_id, "closed": True}
