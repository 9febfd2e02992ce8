from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import LOG_LEVEL
from logging_config import setup_logging
from routers import upload_router, data_router, chart_router

logger = setup_logging(LOG_LEVEL)

app = FastAPI(
    title="Smart Dashboard Charts Backend",
    description="Backend API that turns spreadsheet rows and AI chart descriptors into rendered charts.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(upload_router.router)
app.include_router(data_router.router)
app.include_router(chart_router.router)

logger.info("Smart Dashboard Charts API ready")


@app.get("/")
async def root():
    return {"message": "Smart Dashboard Charts API is running"}
