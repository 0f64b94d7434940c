import logging
import os
import time
from typing import Any, Dict

from pydantic import ValidationError

from backoffice.core.config import settings
from backoffice.schemas.home_page import SECTION_SCHEMAS

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "svg"}

class ContentValidationError(ValueError):
    """Содержимое секции не соответствует ее схеме"""
    def __init__(self, section_key: str, errors: list):
        self.section_key = section_key
        self.errors = errors
        super().__init__(f"Invalid content for section {section_key}")

class ImageUploadError(ValueError):
    pass

def normalize_section(section_key: str, content: Dict[str, Any]) -> Dict[str, Any]:
    """Проверить содержимое известной секции и дополнить значениями по умолчанию"""
    schema = SECTION_SCHEMAS.get(section_key)
    if schema is None:
        return content
    try:
        return schema(**content).dict()
    except ValidationError as e:
        raise ContentValidationError(section_key, e.errors())

def check_slide_index(section_key: str, content: Dict[str, Any], index=None) -> None:
    """Индекс слайда должен существовать до того, как файл попадет на диск"""
    if section_key == "hero_slides" and index is not None:
        slides = (content or {}).get("slides") or []
        if index < 0 or index >= len(slides):
            raise ImageUploadError(f"Slide index {index} out of range")

def set_image_field(section_key: str, content: Dict[str, Any], image_field: str, url: str, index=None) -> Dict[str, Any]:
    """Подставить URL картинки: в слайд hero_slides по индексу или в поле секции"""
    check_slide_index(section_key, content, index)
    content = dict(content or {})
    if section_key == "hero_slides" and index is not None:
        slides = list(content.get("slides") or [])
        slides[index] = {**slides[index], image_field: url}
        content["slides"] = slides
    else:
        content[image_field] = url
    return content

def save_section_image(section_key: str, filename: str, data: bytes) -> str:
    """
    Сохранить картинку секции в UPLOAD_DIR/home-page/<section>/<timestamp>.<ext>.

    Возвращает публичный URL (UPLOAD_URL_PREFIX + относительный путь).
    """
    extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise ImageUploadError(f"Unsupported image type: .{extension}")
    if len(data) > settings.MAX_UPLOAD_SIZE:
        raise ImageUploadError("File too large")

    relative_path = f"home-page/{section_key}/{int(time.time() * 1000)}.{extension}"
    full_path = os.path.join(settings.UPLOAD_DIR, relative_path)
    os.makedirs(os.path.dirname(full_path), exist_ok=True)

    with open(full_path, "wb") as f:
        f.write(data)

    logger.info(f"Home page image saved: {relative_path}")
    return f"{settings.UPLOAD_URL_PREFIX.rstrip('/')}/{relative_path}"
