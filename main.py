from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from pymongo.errors import PyMongoError

import auth
import bootcamps
import courses
import reviews
import users
from config import FILE_UPLOAD_PATH
from database import db, ensure_indexes
from errors import register_exception_handlers
from logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        ensure_indexes(db)
    except PyMongoError as e:
        logger.error("could not ensure indexes", error=str(e))
    yield


# App and CORS
app = FastAPI(title="Bootcamp Directory API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)

app.include_router(bootcamps.router)
app.include_router(courses.router)
app.include_router(reviews.router)
app.include_router(auth.router)
app.include_router(users.router)

# Uploaded bootcamp photos
app.mount("/uploads", StaticFiles(directory=FILE_UPLOAD_PATH, check_dir=False), name="uploads")


# Utility endpoints
@app.get("/")
def root():
    return {"message": "Bootcamp Directory API running"}


@app.get("/test")
def test_database():
    try:
        collections = db.list_collection_names()
        return {"backend": "ok", "database": "ok", "collections": collections}
    except PyMongoError as e:
        return {"backend": "ok", "database": f"error: {e}"}
