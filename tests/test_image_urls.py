"""
Tests for listing image URL resolution
"""
from services.image_urls import (
    PLACEHOLDER_URL,
    UNAVAILABLE_IMAGE,
    resolve_image_url,
    resolve_image_urls,
)

STORAGE = "https://project.storage.example"


def test_empty_path_uses_placeholder():
    for path in (None, "", "   "):
        result = resolve_image_url(path, STORAGE)
        assert result.url == PLACEHOLDER_URL
        assert result.is_placeholder is True


def test_absolute_urls_pass_through():
    url = "https://cdn.example.com/casa.jpg"
    assert resolve_image_url(f"  {url} ", STORAGE).url == url

    public = f"{STORAGE}/storage/v1/object/public/listings-images/public/a.jpg"
    assert resolve_image_url(public, STORAGE).url == public


def test_bare_file_name_goes_under_public():
    result = resolve_image_url("casa.jpg", STORAGE)
    assert result.url == f"{STORAGE}/storage/v1/object/public/listings-images/public/casa.jpg"
    assert result.is_placeholder is False


def test_nested_path_is_kept():
    result = resolve_image_url("host-1/casa.jpg", STORAGE)
    assert result.url == f"{STORAGE}/storage/v1/object/public/listings-images/host-1/casa.jpg"


def test_unconfigured_storage_falls_back():
    result = resolve_image_url("casa.jpg", "")
    assert result.url == UNAVAILABLE_IMAGE
    assert result.is_placeholder is True
    assert result.error == "Invalid URL generated"


def test_url_list_skips_blanks_and_falls_back():
    assert resolve_image_urls(None, STORAGE) == [UNAVAILABLE_IMAGE]
    assert resolve_image_urls(["", "  "], STORAGE) == [UNAVAILABLE_IMAGE]
    urls = resolve_image_urls(["a.jpg", "", "https://x.example/b.jpg"], STORAGE)
    assert urls == [
        f"{STORAGE}/storage/v1/object/public/listings-images/public/a.jpg",
        "https://x.example/b.jpg",
    ]
