from __future__ import annotations

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient
from sqlalchemy import event, func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from session_ledger.db import Database
from session_ledger.models import Transaction

pytestmark = pytest.mark.asyncio


async def _create(client: AsyncClient, *, title: str, amount: float, type_: str) -> None:
    response = await client.post(
        "/transactions",
        json={"title": title, "amount": amount, "type": type_},
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text


async def _count_rows(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Transaction))
    return int(result.scalar_one())


async def test_create_sets_session_cookie_and_returns_empty_body(client: AsyncClient) -> None:
    response = await client.post(
        "/transactions",
        json={"title": "Salary", "amount": 5000, "type": "credit"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.content == b""
    set_cookie = response.headers["set-cookie"]
    assert set_cookie.startswith("sessionId=")
    assert "Max-Age=604800" in set_cookie
    assert "Path=/" in set_cookie
    uuid.UUID(response.cookies["sessionId"])


async def test_second_create_reuses_session(client: AsyncClient) -> None:
    await _create(client, title="Salary", amount=5000, type_="credit")
    first_session = client.cookies["sessionId"]

    second = await client.post(
        "/transactions",
        json={"title": "Rent", "amount": 1500, "type": "debit"},
    )
    assert second.status_code == status.HTTP_201_CREATED
    assert "set-cookie" not in second.headers
    assert client.cookies["sessionId"] == first_session

    listing = await client.get("/transactions")
    assert listing.status_code == status.HTTP_200_OK
    transactions = listing.json()["transactions"]
    assert {item["title"] for item in transactions} == {"Salary", "Rent"}
    assert {item["session_id"] for item in transactions} == {first_session}


async def test_credit_and_debit_amount_signs(client: AsyncClient) -> None:
    await _create(client, title="Freelance", amount=120.5, type_="credit")
    await _create(client, title="Groceries", amount=40, type_="debit")

    response = await client.get("/transactions")
    amounts = {item["title"]: item["amount"] for item in response.json()["transactions"]}

    assert amounts == {"Freelance": 120.5, "Groceries": -40}


async def test_list_trailing_slash_is_equivalent(client: AsyncClient) -> None:
    await _create(client, title="Salary", amount=10, type_="credit")

    response = await client.get("/transactions/")

    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()["transactions"]) == 1


async def test_listing_is_partitioned_by_session(client_factory) -> None:
    alice = await client_factory()
    bob = await client_factory()
    await _create(alice, title="Alice salary", amount=100, type_="credit")
    await _create(bob, title="Bob salary", amount=200, type_="credit")
    await _create(bob, title="Bob rent", amount=50, type_="debit")

    alice_rows = (await alice.get("/transactions")).json()["transactions"]
    bob_rows = (await bob.get("/transactions")).json()["transactions"]

    assert [row["title"] for row in alice_rows] == ["Alice salary"]
    assert all(row["session_id"] == alice.cookies["sessionId"] for row in alice_rows)
    assert len(bob_rows) == 2
    assert all(row["session_id"] == bob.cookies["sessionId"] for row in bob_rows)


async def test_get_transaction_by_id(client: AsyncClient) -> None:
    await _create(client, title="Salary", amount=300, type_="credit")
    listed = (await client.get("/transactions")).json()["transactions"][0]

    response = await client.get(f"/transactions/{listed['id']}")

    assert response.status_code == status.HTTP_200_OK
    transaction = response.json()["transaction"]
    assert transaction["id"] == listed["id"]
    assert transaction["title"] == "Salary"
    assert transaction["amount"] == 300
    assert transaction["session_id"] == client.cookies["sessionId"]
    assert transaction["created_at"]


async def test_get_transaction_accepts_upper_case_uuid(client: AsyncClient) -> None:
    await _create(client, title="Salary", amount=300, type_="credit")
    listed = (await client.get("/transactions")).json()["transactions"][0]

    response = await client.get(f"/transactions/{listed['id'].upper()}")

    assert response.json()["transaction"]["id"] == listed["id"]


async def test_get_transaction_of_other_session_is_not_found(client_factory) -> None:
    owner = await client_factory()
    intruder = await client_factory()
    await _create(owner, title="Private", amount=10, type_="credit")
    await _create(intruder, title="Own", amount=1, type_="credit")
    owned_id = (await owner.get("/transactions")).json()["transactions"][0]["id"]

    response = await intruder.get(f"/transactions/{owned_id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"error": "Transaction not found"}


async def test_get_unknown_transaction_is_not_found(client: AsyncClient) -> None:
    await _create(client, title="Salary", amount=1, type_="credit")

    response = await client.get(f"/transactions/{uuid.uuid4()}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"error": "Transaction not found"}


async def test_malformed_id_is_rejected_without_querying(
    client: AsyncClient,
    database: Database,
) -> None:
    await _create(client, title="Salary", amount=1, type_="credit")
    statements: list[str] = []

    def _record(conn, cursor, statement, parameters, context, executemany) -> None:
        statements.append(statement)

    event.listen(database.engine.sync_engine, "before_cursor_execute", _record)
    try:
        response = await client.get("/transactions/not-a-uuid")
    finally:
        event.remove(database.engine.sync_engine, "before_cursor_execute", _record)

    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["details"]["errors"][0]["loc"] == ["path", "id"]
    assert statements == []


async def test_summary_nets_credits_and_debits(client: AsyncClient) -> None:
    await _create(client, title="Salary", amount=100, type_="credit")
    await _create(client, title="Rent", amount=30, type_="debit")

    response = await client.get("/transactions/summary")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"summary": {"amount": 70}}


async def test_summary_for_empty_session_is_zero(client: AsyncClient) -> None:
    client.cookies.set("sessionId", str(uuid.uuid4()))

    response = await client.get("/transactions/summary")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"summary": {"amount": 0}}


async def test_list_for_empty_session_is_empty(client: AsyncClient) -> None:
    client.cookies.set("sessionId", "fresh-session")

    response = await client.get("/transactions")

    assert response.json() == {"transactions": []}


@pytest.mark.parametrize(
    "path",
    ["/transactions", "/transactions/summary", f"/transactions/{uuid.uuid4()}"],
)
async def test_guarded_routes_require_session_cookie(client: AsyncClient, path: str) -> None:
    response = await client.get(path)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    payload = response.json()
    assert payload["code"] == "unauthorized"
    assert payload["details"]["request_id"] == response.headers["X-Request-ID"]


async def test_missing_type_is_rejected_and_nothing_inserted(
    client: AsyncClient,
    session: AsyncSession,
) -> None:
    response = await client.post("/transactions", json={"title": "Salary", "amount": 100})

    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["details"]["errors"] == [
        {"loc": ["body", "type"], "msg": "Field required", "type": "missing"}
    ]
    assert "set-cookie" not in response.headers
    assert await _count_rows(session) == 0


@pytest.mark.parametrize(
    "body",
    [
        {"title": "Salary", "amount": 100, "type": "refund"},
        {"title": "Salary", "amount": "100", "type": "credit"},
        {"title": "Salary", "amount": True, "type": "credit"},
        {"title": 42, "amount": 100, "type": "credit"},
        {"amount": 100, "type": "credit"},
        {"title": "Salary", "amount": -5, "type": "debit"},
        {"title": "Salary", "amount": 2e12, "type": "credit"},
        ["Salary", 100, "credit"],
    ],
)
async def test_invalid_bodies_are_rejected(
    client: AsyncClient,
    session: AsyncSession,
    body: object,
) -> None:
    response = await client.post("/transactions", json=body)

    assert response.status_code == 422
    assert await _count_rows(session) == 0


async def test_non_json_body_is_rejected(client: AsyncClient, session: AsyncSession) -> None:
    response = await client.post(
        "/transactions",
        content=b"title=Salary",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["details"]["errors"][0]["type"] == "json_invalid"
    assert await _count_rows(session) == 0


async def test_oversized_integer_amount_is_rejected(client: AsyncClient, session: AsyncSession) -> None:
    response = await client.post(
        "/transactions",
        content=b'{"title": "Salary", "amount": 1' + b"0" * 400 + b', "type": "credit"}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"
    assert "set-cookie" not in response.headers
    assert await _count_rows(session) == 0


async def test_extra_body_fields_are_ignored(client: AsyncClient) -> None:
    response = await client.post(
        "/transactions",
        json={"title": "Bonus", "amount": 10, "type": "credit", "category": "work"},
    )

    assert response.status_code == status.HTTP_201_CREATED


async def test_create_with_existing_cookie_does_not_mint_session(client: AsyncClient) -> None:
    client.cookies.set("sessionId", "existing-session")

    response = await client.post(
        "/transactions",
        json={"title": "Salary", "amount": 10, "type": "credit"},
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert "set-cookie" not in response.headers
    rows = (await client.get("/transactions")).json()["transactions"]
    assert [row["session_id"] for row in rows] == ["existing-session"]
