"""Нормализация ссылок на внешние видео (YouTube, Facebook) для iframe."""
import re
from urllib.parse import quote

ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

YOUTUBE_ID_RE = re.compile(
    r"(?:youtube\.com/(?:[^/]+/.+/|(?:v|e(?:mbed)?)/|.*[?&]v=)|youtu\.be/)([^\"&?/\s]{11})"
)
FACEBOOK_REEL_RE = re.compile(r"facebook\.com/(?:reel|reels)/(\d+)", re.IGNORECASE)
FACEBOOK_VIDEO_RE = re.compile(r"facebook\.com/(?:watch/\?v=|videos/)(\d+)", re.IGNORECASE)

FACEBOOK_PLUGIN_URL = "https://www.facebook.com/plugins/video.php"

def normalize_external_url(raw: str) -> str:
    """Привести введенную ссылку к абсолютному https URL"""
    raw = (raw or "").strip()
    if not raw:
        return ""
    if ABSOLUTE_URL_RE.match(raw):
        return raw
    if raw.startswith("//"):
        return f"https:{raw}"
    return f"https://{raw}"

def get_embed_url(raw: str) -> str:
    """
    URL для iframe.

    YouTube -> https://www.youtube.com/embed/<id>?rel=0
    Facebook reel/video -> plugin video.php с каноничной ссылкой watch/?v=<id>
    Остальное возвращается нормализованным без изменений.
    """
    url = normalize_external_url(raw)
    if not url:
        return ""

    youtube_match = YOUTUBE_ID_RE.search(url)
    if youtube_match:
        return f"https://www.youtube.com/embed/{youtube_match.group(1)}?rel=0"

    if "facebook.com" in url or "fb.watch" in url:
        if "facebook.com/plugins/video.php" in url:
            return url

        # Reels напрямую часто не встраиваются, watch-ссылка работает
        video_match = FACEBOOK_REEL_RE.search(url) or FACEBOOK_VIDEO_RE.search(url)
        canonical_href = f"https://www.facebook.com/watch/?v={video_match.group(1)}" if video_match else url

        # quote с этим safe совпадает с encodeURIComponent
        href = quote(canonical_href, safe="!*'()")
        return f"{FACEBOOK_PLUGIN_URL}?href={href}&show_text=false&lazy=true"

    return url
