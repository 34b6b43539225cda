# backend/main.py
import logging

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config import settings
from database import init_db
from utils.storage import bucket_root

# Router imports
from routes.auth import router as auth_router
from routes.logs import router as logs_router
from routes.apd import router as apd_router
from routes.referensi import router as referensi_router
from routes.pegawai import router as pegawai_router
from routes.distribusi import router as distribusi_router
from routes.rekap import router as rekap_router
from routes.peminjaman import router as peminjaman_router
from routes.pengajuan import router as pengajuan_router
from routes.files import router as files_router, storage_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialisation
init_db()

app = FastAPI(title="APD Dashboard API", version="1.0.0")

# Public bucket: every stored key is reachable under /storage/<bucket>/<key>
app.mount(
    f"/storage/{settings.STORAGE_BUCKET}",
    StaticFiles(directory=str(bucket_root())),
    name="storage",
)

# CORS configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Router registration
app.include_router(auth_router)
app.include_router(logs_router)
app.include_router(apd_router)
app.include_router(referensi_router)
app.include_router(pegawai_router)
app.include_router(distribusi_router)
app.include_router(rekap_router)
app.include_router(peminjaman_router)
app.include_router(pengajuan_router)
app.include_router(files_router)
app.include_router(storage_router)

logger.info(f"APD Dashboard API ready, storage bucket at {bucket_root()}")


@app.get("/")
def read_root():
    return {"message": "APD Dashboard API berjalan!"}
