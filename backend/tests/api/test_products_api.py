import pytest


@pytest.mark.asyncio
async def test_get_product(test_client, burger_menu):
    response = await test_client.get(f"/api/v1/products/{burger_menu['burger']}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Burger"
    assert [(i["ingredient_name"], i["amount"]) for i in body["ingredients"]] == [
        ("Beef", 150),
        ("Cheese", 30),
        ("Onion", 20),
    ]


@pytest.mark.asyncio
async def test_get_unknown_product_returns_404(test_client):
    response = await test_client.get("/api/v1/products/4242")
    assert response.status_code == 404
    assert response.json()["code"] == 404


@pytest.mark.asyncio
async def test_list_products(test_client, burger_menu):
    response = await test_client.get("/api/v1/products")
    assert response.status_code == 200
    assert [p["name"] for p in response.json()] == ["Burger"]
