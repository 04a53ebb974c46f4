from typing import Optional

from alumnilink.config import settings

UPLOADS_PREFIX = "uploads/"


def get_avatar_url(profile_picture: Optional[str], base_url: Optional[str] = None) -> Optional[str]:
    """
    Resolve a stored profile picture path to an absolute URL.

    Full URLs are returned unchanged; relative paths are served from the
    uploads directory of the API host. Returns None when there is no
    picture so clients can render their own fallback.
    """
    if not profile_picture or not isinstance(profile_picture, str):
        return None

    if profile_picture.startswith(("http://", "https://")):
        return profile_picture

    base = (base_url or settings.API_URL).rstrip("/")
    clean_path = profile_picture.replace("\\", "/").lstrip("/")
    if clean_path.startswith(UPLOADS_PREFIX):
        return f"{base}/{clean_path}"
    return f"{base}/{UPLOADS_PREFIX}{clean_path}"
