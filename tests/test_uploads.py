"""Tests for the image upload endpoints."""

import pytest
from httpx import AsyncClient
from PIL import Image


@pytest.fixture
def headers(admin, auth_headers):
    return auth_headers(admin)


@pytest.mark.asyncio
async def test_upload_single_image_converts_to_webp(
    client: AsyncClient, website, headers, png_bytes, file_storage
):
    response = await client.post(
        "/api/upload/image",
        data={"websiteId": str(website.id)},
        files={"image": ("lobby.png", png_bytes(), "image/png")},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["url"].startswith("/public/seaside-hotel/")
    assert data["url"].endswith(".webp")
    assert data["originalName"] == "lobby.png"

    path = file_storage.resolve(data["url"])
    assert path.exists()
    with Image.open(path) as image:
        assert image.format == "WEBP"
    # The pre-conversion file is gone
    assert not path.with_suffix(".png").exists()


@pytest.mark.asyncio
async def test_upload_rejects_disallowed_type(client: AsyncClient, website, headers):
    response = await client.post(
        "/api/upload/image",
        data={"websiteId": str(website.id)},
        files={"image": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("File type not allowed")


@pytest.mark.asyncio
async def test_upload_rejects_oversized_file(client: AsyncClient, website, headers, file_storage):
    file_storage.max_file_size = 10

    response = await client.post(
        "/api/upload/image",
        data={"websiteId": str(website.id)},
        files={"image": ("big.png", b"x" * 11, "image/png")},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["message"].startswith("File too large")


@pytest.mark.asyncio
async def test_upload_rejects_unreadable_image(client: AsyncClient, website, headers, file_storage):
    response = await client.post(
        "/api/upload/image",
        data={"websiteId": str(website.id)},
        files={"image": ("broken.png", b"not really a png", "image/png")},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Invalid image file"
    assert await file_storage.list_website_images(website.name) == []


@pytest.mark.asyncio
async def test_upload_scope_uses_form_website_id(
    client: AsyncClient, other_website, headers, png_bytes
):
    response = await client.post(
        "/api/upload/image",
        data={"websiteId": str(other_website.id)},
        files={"image": ("lobby.png", png_bytes(), "image/png")},
        headers=headers,
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_upload_multiple(client: AsyncClient, website, headers, png_bytes):
    files = [("images", (f"room-{i}.png", png_bytes(), "image/png")) for i in range(3)]

    response = await client.post(
        "/api/upload/multiple", data={"websiteId": str(website.id)}, files=files, headers=headers
    )

    assert response.status_code == 200
    assert len(response.json()["data"]["files"]) == 3


@pytest.mark.asyncio
async def test_upload_multiple_limit(client: AsyncClient, website, headers, png_bytes, file_storage):
    file_storage.max_files_per_request = 2
    files = [("images", (f"room-{i}.png", png_bytes(), "image/png")) for i in range(3)]

    response = await client.post(
        "/api/upload/multiple", data={"websiteId": str(website.id)}, files=files, headers=headers
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Maximum 2 files per request"


@pytest.mark.asyncio
async def test_upload_gallery_variants(client: AsyncClient, website, headers, png_bytes, file_storage):
    response = await client.post(
        "/api/upload/gallery",
        data={"websiteId": str(website.id)},
        files=[("images", ("terrace.png", png_bytes(1000, 600), "image/png"))],
        headers=headers,
    )

    assert response.status_code == 200
    variants = response.json()["data"]["files"][0]
    assert set(variants) == {"originalName", "original", "large", "medium", "thumbnail"}

    with Image.open(file_storage.resolve(variants["medium"])) as medium:
        assert medium.width == 800
    with Image.open(file_storage.resolve(variants["thumbnail"])) as thumbnail:
        assert thumbnail.size == (300, 300)
    with Image.open(file_storage.resolve(variants["large"])) as large:
        # Never enlarged
        assert large.width == 1000


@pytest.mark.asyncio
async def test_list_and_delete_images(client: AsyncClient, website, headers, stored_image, file_storage):
    first = await stored_image(website.name)
    second = await stored_image(website.name)

    response = await client.get(f"/api/upload/list/{website.id}", headers=headers)
    assert response.status_code == 200
    assert {image["path"] for image in response.json()["data"]["images"]} == {first, second}
    assert response.json()["count"] == 2

    response = await client.delete(
        f"/api/upload/{website.id}/image", params={"path": first}, headers=headers
    )
    assert response.status_code == 200
    assert not file_storage.resolve(first).exists()
    assert file_storage.resolve(second).exists()


@pytest.mark.asyncio
async def test_delete_image_of_another_website(
    client: AsyncClient, website, other_website, headers, stored_image, file_storage
):
    foreign = await stored_image(other_website.name)

    response = await client.delete(
        f"/api/upload/{website.id}/image", params={"path": foreign}, headers=headers
    )

    assert response.status_code == 400
    assert file_storage.resolve(foreign).exists()


@pytest.mark.asyncio
async def test_delete_image_path_traversal(client: AsyncClient, website, headers):
    response = await client.delete(
        f"/api/upload/{website.id}/image",
        params={"path": "/public/seaside-hotel/../../etc/passwd"},
        headers=headers,
    )

    assert response.status_code == 400
