"""
Image URL resolution for listing photos kept in object storage
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from config.settings import settings, LISTINGS_BUCKET

PLACEHOLDER_URL = "/placeholder.svg"
PUBLIC_STORAGE_MARKER = "/storage/v1/object/public/"
UNAVAILABLE_IMAGE = (
    'data:image/svg+xml,<svg xmlns="http://www.w3.org/2000/svg" width="400" height="300" '
    'viewBox="0 0 400 300"><rect width="400" height="300" fill="%23f3f4f6"/>'
    '<text x="200" y="150" text-anchor="middle" fill="%236b7280" '
    'font-family="Arial,sans-serif" font-size="16">Imagen no disponible</text></svg>'
)


@dataclass
class ImageUrlResult:
    url: str
    is_placeholder: bool
    error: Optional[str] = None


def public_object_url(path: str, storage_url: Optional[str] = None) -> Optional[str]:
    base = storage_url if storage_url is not None else settings.storage_public_url
    if not base:
        return None
    return f"{base.rstrip('/')}{PUBLIC_STORAGE_MARKER}{LISTINGS_BUCKET}/{path.lstrip('/')}"


def resolve_image_url(image_path: Optional[str], storage_url: Optional[str] = None) -> ImageUrlResult:
    """
    Map a stored image path to a displayable URL, falling back to placeholders.
    """
    if not image_path or not image_path.strip():
        return ImageUrlResult(url=PLACEHOLDER_URL, is_placeholder=True)

    clean_path = image_path.strip()

    if clean_path.startswith(("http://", "https://")):
        return ImageUrlResult(url=clean_path, is_placeholder=False)

    if PUBLIC_STORAGE_MARKER in clean_path:
        return ImageUrlResult(url=clean_path, is_placeholder=False)

    # Bare file names were uploaded under public/
    if not clean_path.startswith("public/") and "/" not in clean_path:
        clean_path = f"public/{clean_path}"

    url = public_object_url(clean_path, storage_url)
    if not url:
        return ImageUrlResult(url=UNAVAILABLE_IMAGE, is_placeholder=True, error="Invalid URL generated")

    return ImageUrlResult(url=url, is_placeholder=False)


def resolve_image_urls(image_paths: Optional[Iterable[str]], storage_url: Optional[str] = None) -> List[str]:
    urls = [
        resolve_image_url(path, storage_url).url
        for path in (image_paths or [])
        if path and path.strip()
    ]
    return urls or [UNAVAILABLE_IMAGE]
