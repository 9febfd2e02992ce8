import os
from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Colour palette used when a request does not say otherwise
DEFAULT_DARK_MODE = os.getenv("DEFAULT_DARK_MODE", "false").strip().lower() in ("1", "true", "yes")

# Backend address used by the Streamlit front end
API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")

# Where uploaded files are stored
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploaded_files")
os.makedirs(UPLOAD_DIR, exist_ok=True)
