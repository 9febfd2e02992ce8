import logging
import os
import uuid
from fastapi import UploadFile
from config import UPLOAD_DIR

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = [".xlsx", ".xls", ".csv"]


def save_uploaded_file(file: UploadFile) -> str:
    """
    Save an uploaded spreadsheet under UPLOAD_DIR with a random name.
    Raises ValueError for anything that is not Excel or CSV.
    """
    ext = os.path.splitext(file.filename or "")[1]
    if ext.lower() not in ALLOWED_EXTENSIONS:
        raise ValueError("Only Excel (.xlsx, .xls) and CSV (.csv) files are supported.")

    unique_name = f"{uuid.uuid4().hex}{ext.lower()}"
    file_path = os.path.join(UPLOAD_DIR, unique_name)

    with open(file_path, "wb") as f:
        f.write(file.file.read())

    logger.info("Stored upload %s as %s", file.filename, file_path)
    return file_path


def discard_uploaded_file(file_path: str) -> None:
    if os.path.exists(file_path):
        os.remove(file_path)
        logger.info("Removed stored upload %s", file_path)
