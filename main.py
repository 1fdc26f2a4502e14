# main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from routers import attendance_router, employee_router
from utils.excel_extraction import AttendanceUploadError
import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.PERSIST_RECORDS:
        from database import create_indexes
        await create_indexes()
        logger.info("Persistence enabled, database %s", config.MONGODB_DB)
    else:
        logger.info("Persistence disabled, uploads are not stored")
    yield

app = FastAPI(title="Attendance Productivity Dashboard API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(AttendanceUploadError)
async def upload_error_handler(request: Request, exc: AttendanceUploadError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message}
    )

app.include_router(attendance_router.router)
app.include_router(employee_router.router)

@app.get("/")
def read_root():
    return {"message": "Welcome to the Attendance Productivity Dashboard"}
