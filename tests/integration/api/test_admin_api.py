"""Tests for admin console API endpoints."""

from collections.abc import Awaitable, Callable
from uuid import uuid4

import pytest
from httpx import AsyncClient

from domain.entities.profile import Role, UserProfile

HeadersFor = Callable[[UserProfile], dict[str, str]]


@pytest.fixture
async def pending_seller(make_profile: Callable[..., Awaitable[UserProfile]]) -> UserProfile:
    return await make_profile(Role.SELLER, contact_name="New Oxygen Depot")


class TestAccess:
    @pytest.mark.asyncio
    async def test_buyers_are_rejected(
        self, client: AsyncClient, buyer: UserProfile, headers_for: HeadersFor
    ) -> None:
        response = await client.get("/api/v1/admin/stats", headers=headers_for(buyer))

        assert response.status_code == 403
        assert response.json()["error_code"] == "ROLE_REQUIRED"


class TestStats:
    @pytest.mark.asyncio
    async def test_counts(
        self,
        client: AsyncClient,
        admin: UserProfile,
        buyer: UserProfile,
        seller: UserProfile,
        pending_seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.get("/api/v1/admin/stats", headers=headers_for(admin))

        assert response.status_code == 200
        assert response.json()["data"] == {
            "total_users": 4,
            "total_sellers": 2,
            "total_buyers": 1,
            "pending_approvals": 1,
            "total_cylinders": 5,
        }


class TestSellers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("status", "expected"),
        [("all", {"seller", "pending_seller"}), ("pending", {"pending_seller"}), ("approved", {"seller"})],
    )
    async def test_list_filters(
        self,
        client: AsyncClient,
        admin: UserProfile,
        seller: UserProfile,
        pending_seller: UserProfile,
        headers_for: HeadersFor,
        status: str,
        expected: set[str],
    ) -> None:
        ids = {"seller": str(seller.id), "pending_seller": str(pending_seller.id)}

        response = await client.get(
            "/api/v1/admin/sellers", params={"status": status}, headers=headers_for(admin)
        )

        assert response.status_code == 200
        assert {s["id"] for s in response.json()["data"]} == {ids[name] for name in expected}

    @pytest.mark.asyncio
    async def test_seller_detail_includes_activity(
        self,
        client: AsyncClient,
        admin: UserProfile,
        pending_seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        headers = headers_for(admin)
        await client.post(
            f"/api/v1/admin/sellers/{pending_seller.id}/approval",
            json={"approved": True},
            headers=headers,
        )

        response = await client.get(f"/api/v1/admin/sellers/{pending_seller.id}", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["seller"]["approved"] is True
        assert [a["action"] for a in data["activity"]] == ["seller.approved"]

    @pytest.mark.asyncio
    async def test_unknown_seller(
        self, client: AsyncClient, admin: UserProfile, headers_for: HeadersFor
    ) -> None:
        response = await client.get(f"/api/v1/admin/sellers/{uuid4()}", headers=headers_for(admin))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_buyer_id_is_not_a_seller(
        self,
        client: AsyncClient,
        admin: UserProfile,
        buyer: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.get(f"/api/v1/admin/sellers/{buyer.id}", headers=headers_for(admin))

        assert response.status_code == 404


class TestApproval:
    @pytest.mark.asyncio
    async def test_approve_makes_seller_visible(
        self,
        client: AsyncClient,
        admin: UserProfile,
        pending_seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.post(
            f"/api/v1/admin/sellers/{pending_seller.id}/approval",
            json={"approved": True},
            headers=headers_for(admin),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["approved"] is True
        assert data["active"] is True

    @pytest.mark.asyncio
    async def test_unapprove_hides_seller(
        self,
        client: AsyncClient,
        admin: UserProfile,
        seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.post(
            f"/api/v1/admin/sellers/{seller.id}/approval",
            json={"approved": False},
            headers=headers_for(admin),
        )

        data = response.json()["data"]
        assert data["approved"] is False
        assert data["active"] is False

    @pytest.mark.asyncio
    async def test_approved_seller_can_manage_stock(
        self,
        client: AsyncClient,
        admin: UserProfile,
        pending_seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        await client.post(
            f"/api/v1/admin/sellers/{pending_seller.id}/approval",
            json={"approved": True},
            headers=headers_for(admin),
        )

        response = await client.put(
            "/api/v1/seller/stock",
            json={"cylinders_available": 8},
            headers=headers_for(pending_seller),
        )

        assert response.status_code == 200


class TestUpdateSeller:
    @pytest.mark.asyncio
    async def test_patch_fields(
        self,
        client: AsyncClient,
        admin: UserProfile,
        seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.patch(
            f"/api/v1/admin/sellers/{seller.id}",
            json={"cylinders_available": 12, "contact_name": "Harbour Oxygen Ltd"},
            headers=headers_for(admin),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["cylinders_available"] == 12
        assert data["contact_name"] == "Harbour Oxygen Ltd"

    @pytest.mark.asyncio
    async def test_rejects_unknown_fields(
        self,
        client: AsyncClient,
        admin: UserProfile,
        seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.patch(
            f"/api/v1/admin/sellers/{seller.id}",
            json={"role": "buyer"},
            headers=headers_for(admin),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_rejects_negative_stock(
        self,
        client: AsyncClient,
        admin: UserProfile,
        seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.patch(
            f"/api/v1/admin/sellers/{seller.id}",
            json={"cylinders_available": -4},
            headers=headers_for(admin),
        )

        assert response.status_code == 422


class TestActivityFeed:
    @pytest.mark.asyncio
    async def test_feed_records_registration_and_moderation(
        self,
        client: AsyncClient,
        admin: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        registered = await client.post(
            "/api/v1/auth/register",
            json={
                "email": "depot@example.com",
                "password": "Sup3r$ecret",
                "confirm_password": "Sup3r$ecret",
                "role": "seller",
                "contact_name": "City Depot",
                "phone_number": "+91 98765 43210",
            },
        )
        seller_id = registered.json()["data"]["id"]
        headers = headers_for(admin)
        await client.post(
            f"/api/v1/admin/sellers/{seller_id}/approval", json={"approved": True}, headers=headers
        )

        response = await client.get("/api/v1/admin/activity", headers=headers)

        assert response.status_code == 200
        actions = {a["action"] for a in response.json()["data"]}
        assert actions == {"seller.registered", "seller.approved"}

    @pytest.mark.asyncio
    async def test_feed_pagination(
        self, client: AsyncClient, admin: UserProfile, headers_for: HeadersFor
    ) -> None:
        response = await client.get(
            "/api/v1/admin/activity", params={"limit": 10, "offset": 5}, headers=headers_for(admin)
        )

        assert response.json()["meta"] == {"limit": 10, "offset": 5}
