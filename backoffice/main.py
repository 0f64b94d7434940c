# backoffice/main.py
import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from backoffice.core.config import settings
from backoffice.core.logging_config import setup_logging
from backoffice.database import create_tables
from backoffice.api.v1.api import api_router

setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Shop back-office: content management and BotBhai CRM sync",
    version=settings.VERSION
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.API_V1_STR)

# Загруженные картинки главной страницы
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount(settings.UPLOAD_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} v{settings.VERSION}", "status": "ok"}

@app.get("/health")
async def health():
    return {"status": "ok", "service": "shop-backoffice"}

# Инициализация БД
create_tables()
