# backoffice/api/v1/endpoints/media.py
from fastapi import APIRouter, Depends, Query
from backoffice.api.deps import require_admin
from backoffice.utils.video_embed import get_embed_url, normalize_external_url

router = APIRouter()

@router.get("/embed")
async def video_embed(
    url: str = Query(..., min_length=1, description="Ссылка на видео YouTube / Facebook"),
    current_user = Depends(require_admin)
):
    """Предпросмотр: во что превратится ссылка на видео в iframe"""
    return {
        "url": normalize_external_url(url),
        "embed_url": get_embed_url(url),
    }
