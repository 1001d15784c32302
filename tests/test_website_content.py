"""Tests for rooms, hero sections, facilities, reviews and the single-object sections."""

import pytest
from httpx import AsyncClient


@pytest.fixture
def content_url(website):
    def _content_url(path: str) -> str:
        return f"/api/websites/{website.id}/{path}"

    return _content_url


@pytest.fixture
def headers(admin, auth_headers):
    return auth_headers(admin)


# Rooms

@pytest.mark.asyncio
async def test_room_crud(client: AsyncClient, content_url, headers, sample_room_data):
    response = await client.post(content_url("rooms"), json=sample_room_data, headers=headers)
    assert response.status_code == 201
    room = response.json()["data"]["room"]
    assert room["id"]
    assert room["bedType"] == "King"
    assert room["isAvailable"] is True
    assert room["detailImages"] == []

    response = await client.get(content_url(f"rooms/{room['id']}"), headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["room"]["name"] == "Deluxe Sea View"

    response = await client.put(
        content_url(f"rooms/{room['id']}"),
        json={"basePrice": 210, "description": None},
        headers=headers,
    )
    assert response.status_code == 200
    updated = response.json()["data"]["room"]
    assert updated["basePrice"] == 210
    # null leaves the stored value alone
    assert updated["description"] == "Corner room facing the bay"
    assert updated["id"] == room["id"]

    response = await client.get(content_url("rooms"), headers=headers)
    assert response.json()["count"] == 1

    response = await client.delete(content_url(f"rooms/{room['id']}"), headers=headers)
    assert response.status_code == 200

    response = await client.get(content_url(f"rooms/{room['id']}"), headers=headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Room not found"


@pytest.mark.asyncio
async def test_room_detail_images_limit(client: AsyncClient, content_url, headers, sample_room_data):
    too_many = [f"/public/seaside-hotel/{i}.webp" for i in range(11)]

    response = await client.post(
        content_url("rooms"), json={**sample_room_data, "detailImages": too_many}, headers=headers
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Maximum 10 detail images allowed"

    response = await client.post(
        content_url("rooms"), json={**sample_room_data, "detailImages": too_many[:10]}, headers=headers
    )
    assert response.status_code == 201
    room_id = response.json()["data"]["room"]["id"]

    response = await client.put(content_url(f"rooms/{room_id}"), json={"detailImages": too_many}, headers=headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_room_invalid_bed_type(client: AsyncClient, content_url, headers, sample_room_data):
    response = await client.post(
        content_url("rooms"), json={**sample_room_data, "bedType": "Hammock"}, headers=headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_room_update_deletes_replaced_images(
    client: AsyncClient, content_url, headers, sample_room_data, stored_image, file_storage, website
):
    main = await stored_image(website.name)
    kept = await stored_image(website.name)
    dropped = await stored_image(website.name)
    response = await client.post(
        content_url("rooms"),
        json={**sample_room_data, "mainImage": main, "detailImages": [kept, dropped]},
        headers=headers,
    )
    room_id = response.json()["data"]["room"]["id"]

    # Same values: nothing is removed
    response = await client.put(
        content_url(f"rooms/{room_id}"),
        json={"mainImage": main, "detailImages": [kept, dropped]},
        headers=headers,
    )
    assert response.status_code == 200
    assert all(file_storage.resolve(p).exists() for p in (main, kept, dropped))

    new_main = await stored_image(website.name)
    response = await client.put(
        content_url(f"rooms/{room_id}"),
        json={"mainImage": new_main, "detailImages": [kept]},
        headers=headers,
    )
    assert response.status_code == 200
    assert not file_storage.resolve(main).exists()
    assert not file_storage.resolve(dropped).exists()
    assert file_storage.resolve(kept).exists()
    assert file_storage.resolve(new_main).exists()


@pytest.mark.asyncio
async def test_room_delete_removes_owned_images(
    client: AsyncClient, content_url, headers, sample_room_data, stored_image, file_storage, website
):
    main = await stored_image(website.name)
    gallery = await stored_image(website.name)
    response = await client.post(
        content_url("rooms"),
        json={**sample_room_data, "mainImage": main, "images": [gallery]},
        headers=headers,
    )
    room_id = response.json()["data"]["room"]["id"]

    response = await client.delete(content_url(f"rooms/{room_id}"), headers=headers)

    assert response.status_code == 200
    assert not file_storage.resolve(main).exists()
    assert not file_storage.resolve(gallery).exists()


@pytest.mark.asyncio
async def test_room_not_found(client: AsyncClient, content_url, headers):
    response = await client.put(content_url("rooms/missing"), json={"name": "X"}, headers=headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_other_admin_cannot_add_room(
    client: AsyncClient, make_user, other_website, auth_headers, content_url, sample_room_data
):
    outsider = await make_user("outsider@example.com", website=other_website)

    response = await client.post(content_url("rooms"), json=sample_room_data, headers=auth_headers(outsider))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_room_update_keeps_files_of_other_websites(
    client: AsyncClient, content_url, headers, sample_room_data, stored_image, file_storage, other_website
):
    foreign = await stored_image(other_website.name)
    response = await client.post(
        content_url("rooms"), json={**sample_room_data, "mainImage": foreign}, headers=headers
    )
    room_id = response.json()["data"]["room"]["id"]

    response = await client.put(content_url(f"rooms/{room_id}"), json={"mainImage": ""}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["room"]["mainImage"] == ""
    assert file_storage.resolve(foreign).exists()


@pytest.mark.asyncio
async def test_room_delete_keeps_files_of_other_websites(
    client: AsyncClient, content_url, headers, sample_room_data, stored_image, file_storage, website, other_website
):
    foreign = await stored_image(other_website.name)
    own = await stored_image(website.name)
    response = await client.post(
        content_url("rooms"),
        json={**sample_room_data, "mainImage": own, "images": [foreign]},
        headers=headers,
    )
    room_id = response.json()["data"]["room"]["id"]

    response = await client.delete(content_url(f"rooms/{room_id}"), headers=headers)

    assert response.status_code == 200
    assert not file_storage.resolve(own).exists()
    assert file_storage.resolve(foreign).exists()


# Hero sections

@pytest.mark.asyncio
async def test_hero_section_upsert_is_idempotent(
    client: AsyncClient, content_url, headers, stored_image, file_storage, website
):
    image = await stored_image(website.name)
    payload = {"page": "home", "image": image, "text": "Welcome", "subText": "By the sea"}

    first = await client.post(content_url("hero-sections"), json=payload, headers=headers)
    second = await client.post(content_url("hero-sections"), json=payload, headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json()["data"]["heroSection"]["id"] == second.json()["data"]["heroSection"]["id"]
    assert second.json()["data"]["heroSection"]["isActive"] is True

    response = await client.get(content_url("hero-sections"), headers=headers)
    assert response.json()["count"] == 1
    assert file_storage.resolve(image).exists()


@pytest.mark.asyncio
async def test_hero_section_image_replacement(
    client: AsyncClient, content_url, headers, stored_image, file_storage, website
):
    old = await stored_image(website.name)
    new = await stored_image(website.name)
    await client.post(content_url("hero-sections"), json={"page": "about", "image": old}, headers=headers)

    response = await client.post(
        content_url("hero-sections"), json={"page": "about", "image": new}, headers=headers
    )

    assert response.status_code == 200
    assert not file_storage.resolve(old).exists()
    assert file_storage.resolve(new).exists()


@pytest.mark.asyncio
async def test_hero_section_by_page_and_delete(client: AsyncClient, content_url, headers):
    response = await client.post(
        content_url("hero-sections"), json={"page": "dining", "text": "Eat"}, headers=headers
    )
    hero_id = response.json()["data"]["heroSection"]["id"]

    response = await client.get(content_url("hero-sections/page/dining"), headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["heroSection"]["text"] == "Eat"

    response = await client.get(content_url("hero-sections/page/contact"), headers=headers)
    assert response.status_code == 404

    response = await client.delete(content_url(f"hero-sections/{hero_id}"), headers=headers)
    assert response.status_code == 200

    response = await client.get(content_url("hero-sections"), headers=headers)
    assert response.json()["data"]["heroSections"] == []


@pytest.mark.asyncio
async def test_hero_section_unknown_page(client: AsyncClient, content_url, headers):
    response = await client.post(content_url("hero-sections"), json={"page": "spa"}, headers=headers)

    assert response.status_code == 400


# Facilities

@pytest.mark.asyncio
async def test_facilities_capped_at_six(client: AsyncClient, content_url, headers):
    for i in range(6):
        response = await client.post(
            content_url("facilities"), json={"title": f"Facility {i}"}, headers=headers
        )
        assert response.status_code == 201

    response = await client.post(content_url("facilities"), json={"title": "Facility 7"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Maximum 6 facilities allowed"
    response = await client.get(content_url("facilities"), headers=headers)
    assert response.json()["count"] == 6


@pytest.mark.asyncio
async def test_facility_update_and_delete(client: AsyncClient, content_url, headers):
    response = await client.post(
        content_url("facilities"), json={"title": "Pool", "subTitle": "Heated"}, headers=headers
    )
    facility_id = response.json()["data"]["facility"]["id"]

    response = await client.put(
        content_url(f"facilities/{facility_id}"), json={"title": "Infinity pool"}, headers=headers
    )
    assert response.status_code == 200
    facility = response.json()["data"]["facility"]
    assert facility["title"] == "Infinity pool"
    assert facility["subTitle"] == "Heated"

    response = await client.delete(content_url(f"facilities/{facility_id}"), headers=headers)
    assert response.status_code == 200

    response = await client.delete(content_url(f"facilities/{facility_id}"), headers=headers)
    assert response.status_code == 404


# Reviews

@pytest.mark.asyncio
async def test_review_crud(client: AsyncClient, content_url, headers):
    response = await client.post(
        content_url("reviews"), json={"name": "Ana", "review": "Lovely", "rating": 5}, headers=headers
    )
    assert response.status_code == 201
    review_id = response.json()["data"]["review"]["id"]

    response = await client.put(content_url(f"reviews/{review_id}"), json={"rating": 4}, headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["review"]["rating"] == 4
    assert response.json()["data"]["review"]["name"] == "Ana"

    response = await client.delete(content_url(f"reviews/{review_id}"), headers=headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_review_rating_bounds(client: AsyncClient, content_url, headers):
    response = await client.post(content_url("reviews"), json={"name": "Bo", "rating": 6}, headers=headers)

    assert response.status_code == 400


# Offer

@pytest.mark.asyncio
async def test_offer_create_requires_core_fields(client: AsyncClient, content_url, headers):
    response = await client.put(content_url("offer"), json={"title": "Summer"}, headers=headers)

    assert response.status_code == 400
    assert "subtitle" in response.json()["message"]
    assert "offer_percentage" in response.json()["message"]


@pytest.mark.asyncio
async def test_offer_lifecycle(client: AsyncClient, content_url, headers, stored_image, file_storage, website):
    response = await client.get(content_url("offer"), headers=headers)
    assert response.json() == {"success": True, "data": {"offer": None}}

    image = await stored_image(website.name)
    response = await client.put(
        content_url("offer"),
        json={"title": "Summer", "subtitle": "Stay 3 pay 2", "offer_percentage": 30, "offer_image": image},
        headers=headers,
    )
    assert response.status_code == 200
    offer = response.json()["data"]["offer"]
    assert offer["offer_available"] is True
    assert offer["offer_percentage"] == 30

    response = await client.put(content_url("offer"), json={"offer_percentage": 25}, headers=headers)
    assert response.status_code == 200
    offer = response.json()["data"]["offer"]
    assert offer["offer_percentage"] == 25
    assert offer["title"] == "Summer"

    response = await client.delete(content_url("offer"), headers=headers)
    assert response.status_code == 200
    assert not file_storage.resolve(image).exists()

    response = await client.get(content_url("offer"), headers=headers)
    assert response.json()["data"]["offer"] is None

    response = await client.delete(content_url("offer"), headers=headers)
    assert response.status_code == 404


# Our story

@pytest.mark.asyncio
async def test_our_story_update(client: AsyncClient, content_url, headers, stored_image, file_storage, website):
    first = await stored_image(website.name)
    second = await stored_image(website.name)

    response = await client.put(
        content_url("our-story"),
        json={"title": "Since 1920", "images": [first, second]},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["data"]["ourStory"]["title"] == "Since 1920"

    response = await client.put(content_url("our-story"), json={"images": [second]}, headers=headers)
    assert response.status_code == 200
    story = response.json()["data"]["ourStory"]
    assert story["images"] == [second]
    assert story["title"] == "Since 1920"
    assert not file_storage.resolve(first).exists()
    assert file_storage.resolve(second).exists()

    response = await client.get(content_url("our-story"), headers=headers)
    assert response.json()["data"]["ourStory"]["images"] == [second]


@pytest.mark.asyncio
async def test_our_story_image_limit(client: AsyncClient, content_url, headers):
    images = [f"/public/seaside-hotel/{i}.webp" for i in range(21)]

    response = await client.put(content_url("our-story"), json={"images": images}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Maximum 20 images allowed"


# Site settings

@pytest.mark.asyncio
async def test_site_settings_logo_replacement(
    client: AsyncClient, content_url, headers, stored_image, file_storage, website
):
    logo = await stored_image(website.name)
    await client.put(content_url("site-settings"), json={"logo": logo}, headers=headers)

    new_logo = await stored_image(website.name)
    response = await client.put(
        content_url("site-settings"),
        json={"logo": new_logo, "footerDescription": "See you soon"},
        headers=headers,
    )

    assert response.status_code == 200
    settings = response.json()["data"]["siteSettings"]
    assert settings == {"logo": new_logo, "footerLogo": "", "footerDescription": "See you soon"}
    assert not file_storage.resolve(logo).exists()

    response = await client.get(content_url("site-settings"), headers=headers)
    assert response.json()["data"]["siteSettings"]["logo"] == new_logo


# Contact info

@pytest.mark.asyncio
async def test_contact_info_update(client: AsyncClient, content_url, headers):
    response = await client.put(
        content_url("contact-info"),
        json={
            "phone": "+34 600 000 000",
            "email": "Desk@Seaside.example.com",
            "coordinates": {"lat": 41.38, "lng": 2.17},
            "socialLinks": {"instagram": "https://instagram.com/seaside"},
        },
        headers=headers,
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["contact"]["phone"] == "+34 600 000 000"
    assert data["contact"]["email"] == "desk@seaside.example.com"
    assert data["contact"]["coordinates"] == {"lat": 41.38, "lng": 2.17}
    assert data["contact"]["address"] == ""
    assert data["socialLinks"] == {"instagram": "https://instagram.com/seaside"}

    response = await client.put(
        content_url("contact-info"), json={"socialLinks": {"facebook": "https://fb.com/seaside"}}, headers=headers
    )
    data = response.json()["data"]
    assert data["contact"]["phone"] == "+34 600 000 000"
    assert data["socialLinks"] == {
        "instagram": "https://instagram.com/seaside",
        "facebook": "https://fb.com/seaside",
    }

    response = await client.get(content_url("contact-info"), headers=headers)
    assert response.json()["data"]["contact"]["email"] == "desk@seaside.example.com"


@pytest.mark.asyncio
async def test_contact_info_merges_coordinates(client: AsyncClient, content_url, headers):
    await client.put(
        content_url("contact-info"), json={"coordinates": {"lat": 41.38, "lng": 2.17}}, headers=headers
    )

    response = await client.put(content_url("contact-info"), json={"coordinates": {"lat": 40.0}}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["contact"]["coordinates"] == {"lat": 40.0, "lng": 2.17}


@pytest.mark.asyncio
async def test_content_requires_authentication(client: AsyncClient, content_url):
    response = await client.get(content_url("rooms"))

    assert response.status_code == 401
