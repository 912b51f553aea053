import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_list_faqs_empty(client: AsyncClient):
    """Empty list when nothing was saved yet"""
    response = await client.get("/faq")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_admin_adds_faq(client: AsyncClient, auth_headers_admin):
    payload = {
        "question": "  What is an IDP?  ",
        "answer": "An internally displaced person.",
    }
    response = await client.post("/faq", json=payload, headers=auth_headers_admin)

    assert response.status_code == 201
    data = response.json()
    assert data["question"] == "What is an IDP?"
    assert data["answer"] == payload["answer"]
    assert "id" in data


@pytest.mark.asyncio
async def test_faqs_listed_newest_first(client: AsyncClient, auth_headers_admin):
    for question in ("First?", "Second?"):
        await client.post(
            "/faq",
            json={"question": question, "answer": "Yes."},
            headers=auth_headers_admin,
        )

    response = await client.get("/faq")
    assert [faq["question"] for faq in response.json()] == ["Second?", "First?"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"question": "What is an LGA?"},
        {"question": "   ", "answer": "Local Government Area"},
        {"question": "What is an LGA?", "answer": ""},
    ],
)
async def test_both_fields_required(client: AsyncClient, auth_headers_admin, payload):
    response = await client.post("/faq", json=payload, headers=auth_headers_admin)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_regular_user_cannot_add_faq(client: AsyncClient, auth_headers_user):
    response = await client.post(
        "/faq", json={"question": "Q?", "answer": "A."}, headers=auth_headers_user
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unauthorized_access(client: AsyncClient):
    """401 when no auth header"""
    response = await client.post("/faq", json={"question": "Q?", "answer": "A."})
    assert response.status_code == 401
