# backoffice/api/v1/endpoints/home_page.py
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, File, Form, HTTPException, Path, UploadFile
from sqlalchemy.orm import Session
from backoffice.core.config import settings
from backoffice.database import get_db
from backoffice.api.deps import require_admin
from backoffice.crud.home_page import get_all_sections, get_section, upsert_section, upsert_sections
from backoffice.schemas.home_page import HomePageContentMap, ImageUploadResponse
from backoffice.services.home_page import (
    ContentValidationError, ImageUploadError,
    check_slide_index, normalize_section, save_section_image, set_image_field,
)

router = APIRouter()

SECTION_KEY_PATTERN = r"^[a-z0-9_]{1,100}$"

@router.get("/", response_model=HomePageContentMap)
def read_home_page(
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    """Все секции главной страницы"""
    return get_all_sections(db)

@router.put("/", response_model=HomePageContentMap)
def save_home_page(
    sections: Dict[str, Dict[str, Any]],
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    """Сохранить несколько секций за раз (как кнопка "сохранить все" в редакторе)"""
    try:
        normalized = {key: normalize_section(key, content) for key, content in sections.items()}
    except ContentValidationError as e:
        raise HTTPException(status_code=422, detail={"section": e.section_key, "errors": e.errors})

    upsert_sections(db, normalized)
    return get_all_sections(db)

@router.put("/{section_key}", response_model=Dict[str, Any])
def save_section(
    content: Dict[str, Any],
    section_key: str = Path(..., pattern=SECTION_KEY_PATTERN),
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    try:
        normalized = normalize_section(section_key, content)
    except ContentValidationError as e:
        raise HTTPException(status_code=422, detail={"section": e.section_key, "errors": e.errors})

    return upsert_section(db, section_key, normalized).content

@router.post("/{section_key}/image", response_model=ImageUploadResponse)
async def upload_section_image(
    section_key: str = Path(..., pattern=SECTION_KEY_PATTERN),
    file: UploadFile = File(...),
    image_field: str = Form("image"),
    slide_index: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    current_user = Depends(require_admin)
):
    """
    Загрузка картинки для секции.
    URL сразу записывается в поле image_field секции (для hero_slides - в слайд slide_index).
    """
    # Лишний байт сверх лимита достаточен, чтобы отклонить файл
    data = await file.read(settings.MAX_UPLOAD_SIZE + 1)
    section = get_section(db, section_key)
    content = section.content if section else {}

    try:
        check_slide_index(section_key, content, slide_index)
        url = save_section_image(section_key, file.filename or "", data)
        content = set_image_field(section_key, content, image_field, url, slide_index)
    except ImageUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))

    upsert_section(db, section_key, content)
    return ImageUploadResponse(section_key=section_key, url=url)
