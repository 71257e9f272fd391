import json

import pytest

from stockk.core.exceptions import InternalException
from stockk.main import app
from stockk.orders.interfaces.dependencies import get_order_service
from stockk.tasks.domain.exceptions import TaskEnqueueException

ORDERS_URL = "/api/v1/orders"


@pytest.mark.asyncio
async def test_create_order_returns_201(test_client, burger_menu):
    response = await test_client.post(ORDERS_URL, json={"products": [{"product_id": burger_menu["burger"], "quantity": 2}]})

    assert response.status_code == 201
    body = response.json()
    assert body["id"] > 0
    assert body["created_at"] is not None
    assert [(i["product_id"], i["quantity"]) for i in body["items"]] == [(burger_menu["burger"], 2)]

    stock = {i["name"]: i["current_stock"] for i in (await test_client.get("/api/v1/ingredients")).json()}
    assert stock == {"Beef": 19700, "Cheese": 4940, "Onion": 960}


@pytest.mark.asyncio
async def test_get_order(test_client, burger_menu):
    created = await test_client.post(ORDERS_URL, json={"products": [{"product_id": burger_menu["burger"], "quantity": 1}]})
    order_id = created.json()["id"]

    response = await test_client.get(f"{ORDERS_URL}/{order_id}")
    assert response.status_code == 200
    assert response.json()["id"] == order_id


@pytest.mark.asyncio
async def test_get_unknown_order_returns_404(test_client):
    response = await test_client.get(f"{ORDERS_URL}/4242")
    assert response.status_code == 404
    assert response.json()["code"] == 404


@pytest.mark.asyncio
async def test_insufficient_stock_returns_409(test_client, burger_menu):
    response = await test_client.post(
        ORDERS_URL, json={"products": [{"product_id": burger_menu["burger"], "quantity": 999999}]}
    )

    assert response.status_code == 409
    body = response.json()
    assert body["code"] == 409
    assert body["message"] == "Stock insuffisant"
    assert "Beef" in body["detail"]


@pytest.mark.asyncio
async def test_unknown_product_returns_404(test_client, burger_menu):
    response = await test_client.post(ORDERS_URL, json={"products": [{"product_id": 4242, "quantity": 1}]})

    assert response.status_code == 404
    body = response.json()
    assert body["message"] == "Ressource non trouvée"
    assert "4242" in body["detail"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"products": []},
        {"products": [{"product_id": 0, "quantity": 1}]},
        {"products": [{"product_id": 1, "quantity": 0}]},
        {"products": [{"product_id": 1}]},
        {"products": [{"product_id": "burger", "quantity": 1}]},
        {},
    ],
)
async def test_invalid_order_returns_400(test_client, payload):
    response = await test_client.post(ORDERS_URL, json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["code"] == 400
    assert body["message"] == "Erreur de validation"
    assert body["detail"]


@pytest.mark.asyncio
async def test_quantity_beyond_integer_column_returns_400(test_client, burger_menu):
    response = await test_client.post(
        ORDERS_URL, json={"products": [{"product_id": burger_menu["burger"], "quantity": 10**20}]}
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Erreur de validation"
    stock = {i["name"]: i["current_stock"] for i in (await test_client.get("/api/v1/ingredients")).json()}
    assert stock == {"Beef": 20000, "Cheese": 5000, "Onion": 1000}


@pytest.mark.asyncio
async def test_malformed_json_returns_400(test_client):
    response = await test_client.post(
        ORDERS_URL, content=b'{"products": [', headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.json()["code"] == 400


@pytest.mark.asyncio
async def test_internal_error_hides_detail(test_client):
    class FailingOrderService:
        async def create_order(self, items):
            raise InternalException("connection to server at 10.0.0.3 failed")

    app.dependency_overrides[get_order_service] = lambda: FailingOrderService()
    response = await test_client.post(ORDERS_URL, json={"products": [{"product_id": 1, "quantity": 1}]})

    assert response.status_code == 500
    assert response.json() == {"code": 500, "message": "Erreur interne du serveur", "detail": None}


@pytest.mark.asyncio
async def test_order_triggers_low_stock_alert(test_client, task_queue, burger_menu):
    # 26 burgers: Onion passe à 48 %
    response = await test_client.post(ORDERS_URL, json={"products": [{"product_id": burger_menu["burger"], "quantity": 26}]})

    assert response.status_code == 201
    assert len(task_queue.enqueued) == 1
    payload = json.loads(task_queue.enqueued[0][1])
    assert [i["name"] for i in payload["ingredients"]] == ["Onion"]
    assert task_queue.enqueued[0][2].queue == "critical"


@pytest.mark.asyncio
async def test_alert_failure_keeps_order_created(test_client, task_queue, burger_menu):
    task_queue.fail_with = TaskEnqueueException("task:send_low_stock_alert")

    response = await test_client.post(ORDERS_URL, json={"products": [{"product_id": burger_menu["burger"], "quantity": 26}]})

    assert response.status_code == 201
    order_id = response.json()["id"]
    assert (await test_client.get(f"{ORDERS_URL}/{order_id}")).status_code == 200


@pytest.mark.asyncio
async def test_health(test_client):
    response = await test_client.get("/health")
    assert response.status_code == 200
    assert response.text == "OK"
