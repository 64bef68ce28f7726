from datetime import date
from decimal import Decimal

import pytest

from api.assets import db_manager
from api.users import db_manager as users_db
from db_models.asset import HardwareAsset


def years_ago(years: int) -> str:
    # January 1st so exactly ``years`` whole years have elapsed today
    return date(date.today().year - years, 1, 1).isoformat()


async def create_hardware(client, headers, payload, **overrides):
    resp = await client.post("/api/v1/assets/hardware", json={**payload, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def create_software(client, headers, payload, **overrides):
    resp = await client.post("/api/v1/assets/software", json={**payload, **overrides}, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.anyio
async def test_create_hardware_asset(async_client, user_headers, hardware_payload):
    data = await create_hardware(async_client, user_headers, hardware_payload)
    assert data["asset_type"] == "HARDWARE"
    assert data["serial_number"] == "SN-0001"
    assert data["status"] == "AVAILABLE"
    assert Decimal(data["purchase_price"]) == Decimal("1000")
    assert data["assigned_to"] is None
    assert data["created_by"] == "jdoe"
    assert data["created_at"]
    assert data["last_modified_by"] is None


@pytest.mark.anyio
async def test_create_software_asset_defaults_residual(async_client, admin_headers, software_payload):
    data = await create_software(async_client, admin_headers, software_payload)
    assert data["asset_type"] == "SOFTWARE"
    assert data["license_key"] == "O365-AAAA-BBBB"
    assert Decimal(data["residual_value"]) == Decimal("0")
    assert data["created_by"] == "admin"


@pytest.mark.anyio
async def test_create_requires_authentication(async_client, hardware_payload):
    resp = await async_client.post("/api/v1/assets/hardware", json=hardware_payload)
    assert resp.status_code == 401


@pytest.mark.anyio
@pytest.mark.parametrize(
    "field, value",
    [
        ("purchase_price", "0"),
        ("purchase_price", "-5.00"),
        ("useful_life_years", 0),
        ("residual_value", "-1.00"),
        ("status", "LOST"),
    ],
)
async def test_create_rejects_invalid_fields(async_client, admin_headers, hardware_payload, field, value):
    resp = await async_client.post(
        "/api/v1/assets/hardware",
        json={**hardware_payload, field: value},
        headers=admin_headers,
    )
    assert resp.status_code == 422


@pytest.mark.anyio
async def test_duplicate_serial_number_conflicts(async_client, admin_headers, hardware_payload):
    await create_hardware(async_client, admin_headers, hardware_payload)
    resp = await async_client.post("/api/v1/assets/hardware", json=hardware_payload, headers=admin_headers)
    assert resp.status_code == 409
    assert "SN-0001" in resp.json()["detail"]


@pytest.mark.anyio
async def test_software_license_key_may_repeat(async_client, admin_headers, software_payload):
    await create_software(async_client, admin_headers, software_payload)
    await create_software(async_client, admin_headers, software_payload)


@pytest.mark.anyio
async def test_get_asset_by_id(async_client, admin_headers, hardware_payload):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    resp = await async_client.get(f"/api/v1/assets/{created['id']}", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json()["serial_number"] == "SN-0001"


@pytest.mark.anyio
async def test_get_unknown_asset(async_client, admin_headers):
    resp = await async_client.get("/api/v1/assets/4242", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Asset not found with id: 4242"


@pytest.mark.anyio
async def test_current_value_after_two_years(async_client, admin_headers, hardware_payload):
    created = await create_hardware(
        async_client, admin_headers, hardware_payload, purchase_date=years_ago(2)
    )
    resp = await async_client.get(f"/api/v1/assets/{created['id']}/value", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["asset_id"] == created["id"]
    assert Decimal(data["current_value"]) == Decimal("640.00")


@pytest.mark.anyio
async def test_fully_depreciated_value_is_residual(async_client, admin_headers, hardware_payload):
    created = await create_hardware(
        async_client, admin_headers, hardware_payload, purchase_date="2000-01-01"
    )
    resp = await async_client.get(f"/api/v1/assets/{created['id']}/value", headers=admin_headers)
    assert Decimal(resp.json()["current_value"]) == Decimal("100.00")


@pytest.mark.anyio
async def test_update_is_partial(async_client, admin_headers, user_headers, hardware_payload):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    resp = await async_client.put(
        f"/api/v1/assets/{created['id']}",
        json={"name": "Dell Latitude (refurbished)", "status": "REPAIRING", "purchase_price": None},
        headers=user_headers,
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["name"] == "Dell Latitude (refurbished)"
    assert data["status"] == "REPAIRING"
    assert Decimal(data["purchase_price"]) == Decimal("1000")
    assert data["serial_number"] == "SN-0001"
    assert data["created_by"] == "admin"
    assert data["last_modified_by"] == "jdoe"
    assert data["last_modified_at"] is not None


@pytest.mark.anyio
async def test_update_unknown_asset(async_client, admin_headers):
    resp = await async_client.put("/api/v1/assets/4242", json={"name": "x"}, headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_delete_is_soft_and_not_repeatable(async_client, admin_headers, hardware_payload):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    asset_id = created["id"]

    resp = await async_client.delete(f"/api/v1/assets/{asset_id}", headers=admin_headers)
    assert resp.status_code == 204

    resp = await async_client.get(f"/api/v1/assets/{asset_id}", headers=admin_headers)
    assert resp.status_code == 404

    resp = await async_client.get("/api/v1/assets", headers=admin_headers)
    assert resp.json()["total"] == 0

    resp = await async_client.delete(f"/api/v1/assets/{asset_id}", headers=admin_headers)
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_disposed_row_is_kept(async_client, db_session, admin_headers, hardware_payload):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    await async_client.delete(f"/api/v1/assets/{created['id']}", headers=admin_headers)

    asset = await db_session.get(HardwareAsset, created["id"], populate_existing=True)
    assert asset is not None
    assert asset.status == "DISPOSED"
    assert asset.last_modified_by == "admin"


@pytest.mark.anyio
@pytest.mark.parametrize("prior_status", ["AVAILABLE", "BROKEN", "REPAIRING", "ASSIGNED"])
async def test_assign_forces_assigned_status(async_client, admin_headers, hardware_payload, prior_status):
    created = await create_hardware(async_client, admin_headers, hardware_payload, status=prior_status)

    resp = await async_client.post(
        f"/api/v1/assets/{created['id']}/assign",
        json={"user_id": 2},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["status"] == "ASSIGNED"

    resp = await async_client.get(f"/api/v1/assets/{created['id']}", headers=admin_headers)
    data = resp.json()
    assert data["status"] == "ASSIGNED"
    assert data["assigned_to"]["id"] == 2
    assert data["assigned_to"]["username"] == "jdoe"


@pytest.mark.anyio
async def test_assign_to_unknown_user(async_client, admin_headers, hardware_payload):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    resp = await async_client.post(
        f"/api/v1/assets/{created['id']}/assign",
        json={"user_id": 999},
        headers=admin_headers,
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "User not found with id: 999"


@pytest.mark.anyio
async def test_assign_disposed_asset(async_client, admin_headers, hardware_payload):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    await async_client.delete(f"/api/v1/assets/{created['id']}", headers=admin_headers)
    resp = await async_client.post(
        f"/api/v1/assets/{created['id']}/assign",
        json={"user_id": 2},
        headers=admin_headers,
    )
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_list_assets_pages_and_sorts(async_client, admin_headers, hardware_payload):
    for i, name in enumerate(["Charlie", "Alpha", "Bravo"], start=1):
        await create_hardware(
            async_client, admin_headers, hardware_payload, name=name, serial_number=f"SN-{i}"
        )

    resp = await async_client.get(
        "/api/v1/assets",
        params={"page": 0, "size": 2, "sort_by": "name", "sort_dir": "desc"},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["total"] == 3
    assert data["page"] == 0
    assert data["size"] == 2
    assert [a["name"] for a in data["items"]] == ["Charlie", "Bravo"]

    resp = await async_client.get(
        "/api/v1/assets",
        params={"page": 1, "size": 2, "sort_by": "name", "sort_dir": "desc"},
        headers=admin_headers,
    )
    assert [a["name"] for a in resp.json()["items"]] == ["Alpha"]


@pytest.mark.anyio
async def test_list_assets_rejects_unknown_sort_field(async_client, admin_headers):
    resp = await async_client.get("/api/v1/assets", params={"sort_by": "hashed_password"}, headers=admin_headers)
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_list_mixes_hardware_and_software(async_client, admin_headers, hardware_payload, software_payload):
    await create_hardware(async_client, admin_headers, hardware_payload)
    await create_software(async_client, admin_headers, software_payload)

    resp = await async_client.get("/api/v1/assets", headers=admin_headers)
    types = sorted(a["asset_type"] for a in resp.json()["items"])
    assert types == ["HARDWARE", "SOFTWARE"]


@pytest.mark.anyio
async def test_concurrent_assignments_second_writer_conflicts(
    async_client, session_factory, admin_headers, hardware_payload
):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    asset_id = created["id"]

    async with session_factory() as first, session_factory() as second:
        # Both writers read the same version before either commits
        first_asset = await db_manager.get_asset_or_raise(first, asset_id)
        second_asset = await db_manager.get_asset_or_raise(second, asset_id)
        admin = await users_db.get_user_or_raise(first, 1)
        jdoe = await users_db.get_user_or_raise(second, 2)

        assigned = await db_manager.apply_assignment(first, first_asset, admin, actor="admin")
        assert assigned.assigned_to.id == 1

        with pytest.raises(db_manager.AssetConflictError):
            await db_manager.apply_assignment(second, second_asset, jdoe, actor="jdoe")

    resp = await async_client.get(f"/api/v1/assets/{asset_id}", headers=admin_headers)
    data = resp.json()
    assert data["status"] == "ASSIGNED"
    assert data["assigned_to"]["id"] == 1
    assert data["last_modified_by"] == "admin"


@pytest.mark.anyio
async def test_assignment_from_stale_read_is_rejected(
    async_client, session_factory, admin_headers, user_headers, hardware_payload
):
    created = await create_hardware(async_client, admin_headers, hardware_payload)
    asset_id = created["id"]

    async with session_factory() as stale_session:
        stale = await db_manager.get_asset_or_raise(stale_session, asset_id)
        jdoe = await users_db.get_user_or_raise(stale_session, 2)

        resp = await async_client.post(
            f"/api/v1/assets/{asset_id}/assign",
            json={"user_id": 1},
            headers=user_headers,
        )
        assert resp.status_code == 200, resp.text

        with pytest.raises(db_manager.AssetConflictError):
            await db_manager.apply_assignment(stale_session, stale, jdoe)

    resp = await async_client.get(f"/api/v1/assets/{asset_id}", headers=admin_headers)
    assert resp.json()["assigned_to"]["id"] == 1


@pytest.mark.anyio
async def test_dashboard_stats(async_client, admin_headers, hardware_payload, software_payload):
    await create_hardware(async_client, admin_headers, hardware_payload)
    await create_software(async_client, admin_headers, software_payload)
    await create_software(
        async_client, admin_headers, software_payload,
        name="Expired tool", purchase_price="50.00", expiry_date="2000-01-01",
    )
    disposed = await create_hardware(
        async_client, admin_headers, hardware_payload, serial_number="SN-GONE", purchase_price="999.00"
    )
    await async_client.delete(f"/api/v1/assets/{disposed['id']}", headers=admin_headers)

    resp = await async_client.get("/api/v1/dashboard/stats", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["total_assets"] == 3
    assert Decimal(data["total_value"]) == Decimal("1170.00")
    assert data["active_licenses"] == 1
    assert data["available_assets"] == 3


@pytest.mark.anyio
async def test_dashboard_recent_newest_first(async_client, admin_headers, hardware_payload, software_payload):
    first = await create_hardware(async_client, admin_headers, hardware_payload)
    second = await create_software(async_client, admin_headers, software_payload)

    resp = await async_client.get("/api/v1/dashboard/recent", headers=admin_headers)
    assert resp.status_code == 200, resp.text
    assert [a["id"] for a in resp.json()] == [second["id"], first["id"]]


@pytest.mark.anyio
async def test_dashboard_routes_also_served_under_assets(
    async_client, user_headers, hardware_payload, software_payload
):
    first = await create_hardware(async_client, user_headers, hardware_payload)
    second = await create_software(async_client, user_headers, software_payload)

    resp = await async_client.get("/api/v1/assets/stats", headers=user_headers)
    assert resp.status_code == 200, resp.text
    assert resp.json() == (await async_client.get("/api/v1/dashboard/stats", headers=user_headers)).json()
    assert resp.json()["total_assets"] == 2

    resp = await async_client.get("/api/v1/assets/recent", headers=user_headers)
    assert resp.status_code == 200, resp.text
    assert [a["id"] for a in resp.json()] == [second["id"], first["id"]]


@pytest.mark.anyio
async def test_asset_alias_routes_require_authentication(async_client):
    for path in ("/api/v1/assets/stats", "/api/v1/assets/recent"):
        resp = await async_client.get(path)
        assert resp.status_code == 401
