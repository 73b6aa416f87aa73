"""Tests for marketplace API endpoints."""

from collections.abc import Awaitable, Callable
from uuid import uuid4

import pytest
from httpx import AsyncClient

from domain.entities.profile import GeoPoint, Role, UserProfile

MakeProfile = Callable[..., Awaitable[UserProfile]]
HeadersFor = Callable[[UserProfile], dict[str, str]]

NEARBY = "/api/v1/marketplace/sellers/nearby"


async def _seller(make_profile: MakeProfile, **fields) -> UserProfile:
    defaults = {
        "approved": True,
        "active": True,
        "cylinders_available": 4,
        "location": GeoPoint(latitude=0.0, longitude=0.0),
    }
    defaults.update(fields)
    return await make_profile(Role.SELLER, **defaults)


class TestNearbySellers:
    @pytest.mark.asyncio
    async def test_seller_at_origin(
        self,
        client: AsyncClient,
        buyer: UserProfile,
        seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.get(
            NEARBY,
            params={"latitude": 0, "longitude": 0, "radius_km": 10},
            headers=headers_for(buyer),
        )

        assert response.status_code == 200
        body = response.json()
        assert [s["id"] for s in body["data"]] == [str(seller.id)]
        assert body["data"][0]["distance_km"] == 0.0
        assert body["data"][0]["cylinders_available"] == 5
        assert body["meta"]["total"] == 1
        assert body["meta"]["radius_km"] == 10

    @pytest.mark.asyncio
    async def test_nearest_first(
        self,
        client: AsyncClient,
        buyer: UserProfile,
        make_profile: MakeProfile,
        headers_for: HeadersFor,
    ) -> None:
        far = await _seller(make_profile, location=GeoPoint(0.0, 0.2))
        near = await _seller(make_profile, location=GeoPoint(0.0, 0.1))

        response = await client.get(
            NEARBY,
            params={"latitude": 0, "longitude": 0, "radius_km": 50},
            headers=headers_for(buyer),
        )

        assert [s["id"] for s in response.json()["data"]] == [str(near.id), str(far.id)]

    @pytest.mark.asyncio
    async def test_excludes_sellers_outside_radius(
        self,
        client: AsyncClient,
        buyer: UserProfile,
        make_profile: MakeProfile,
        headers_for: HeadersFor,
    ) -> None:
        await _seller(make_profile, location=GeoPoint(0.0, 0.45))

        response = await client.get(
            NEARBY,
            params={"latitude": 0, "longitude": 0, "radius_km": 1},
            headers=headers_for(buyer),
        )

        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_excludes_ineligible_sellers(
        self,
        client: AsyncClient,
        buyer: UserProfile,
        make_profile: MakeProfile,
        headers_for: HeadersFor,
    ) -> None:
        await _seller(make_profile, approved=False, active=False)
        await _seller(make_profile, active=False)
        await _seller(make_profile, cylinders_available=0)
        await _seller(make_profile, location=None)

        response = await client.get(
            NEARBY,
            params={"latitude": 0, "longitude": 0, "radius_km": 10},
            headers=headers_for(buyer),
        )

        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_default_radius(
        self,
        client: AsyncClient,
        buyer: UserProfile,
        seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.get(
            NEARBY, params={"latitude": 0.1, "longitude": 0}, headers=headers_for(buyer)
        )

        assert response.json()["meta"]["total"] == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params",
        [
            {"latitude": 91, "longitude": 0},
            {"latitude": 0, "longitude": 181},
            {"latitude": 0, "longitude": 0, "radius_km": 0},
            {"longitude": 0},
        ],
    )
    async def test_rejects_invalid_query(
        self, client: AsyncClient, buyer: UserProfile, headers_for: HeadersFor, params: dict
    ) -> None:
        response = await client.get(NEARBY, params=params, headers=headers_for(buyer))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_sellers_cannot_search(
        self, client: AsyncClient, seller: UserProfile, headers_for: HeadersFor
    ) -> None:
        response = await client.get(
            NEARBY, params={"latitude": 0, "longitude": 0}, headers=headers_for(seller)
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "ROLE_REQUIRED"


class TestGetSeller:
    @pytest.mark.asyncio
    async def test_returns_seller_with_price(
        self,
        client: AsyncClient,
        buyer: UserProfile,
        seller: UserProfile,
        headers_for: HeadersFor,
    ) -> None:
        response = await client.get(
            f"/api/v1/marketplace/sellers/{seller.id}", headers=headers_for(buyer)
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["contact_name"] == "Harbour Oxygen"
        assert data["price_per_cylinder"] == 50

    @pytest.mark.asyncio
    async def test_unknown_seller(
        self, client: AsyncClient, buyer: UserProfile, headers_for: HeadersFor
    ) -> None:
        response = await client.get(
            f"/api/v1/marketplace/sellers/{uuid4()}", headers=headers_for(buyer)
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "SELLER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_out_of_stock_seller(
        self,
        client: AsyncClient,
        buyer: UserProfile,
        make_profile: MakeProfile,
        headers_for: HeadersFor,
    ) -> None:
        empty = await _seller(make_profile, cylinders_available=0)

        response = await client.get(
            f"/api/v1/marketplace/sellers/{empty.id}", headers=headers_for(buyer)
        )

        assert response.status_code == 409
        assert response.json()["error_code"] == "SELLER_UNAVAILABLE"
