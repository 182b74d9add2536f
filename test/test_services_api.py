# test/test_services_api.py

from conftest import auth_headers, order_payload

API = "/api/v1"

NEW_SERVICE = {
    "name": "Battery Replacement",
    "description": "Swap worn batteries",
    "category": "phone",
    "base_price": 149.0,
    "estimated_duration": 45,
}


def test_public_listing(client, service):
    response = client.get(f"{API}/services")
    body = response.json()
    assert response.status_code == 200
    assert body["data"][0]["name"] == "Screen Replacement"
    assert body["pagination"]["total"] == 1

    response = client.get(f"{API}/services/{service.id}")
    assert response.json()["data"]["base_price"] == 299.0

    response = client.get(f"{API}/services/999")
    assert response.status_code == 404

def test_filters_and_categories(client, admin, service):
    client.post(f"{API}/services", json={**NEW_SERVICE, "category": "laptop", "is_active": False}, headers=auth_headers(admin))

    response = client.get(f"{API}/services?isActive=true")
    assert response.json()["pagination"]["total"] == 1

    response = client.get(f"{API}/services?category=laptop")
    assert response.json()["data"][0]["is_active"] is False

    response = client.get(f"{API}/services?search=screen")
    assert response.json()["pagination"]["total"] == 1

    response = client.get(f"{API}/services/categories")
    assert response.json()["data"] == ["phone"]

def test_admin_manages_services(client, admin, customer):
    response = client.post(f"{API}/services", json=NEW_SERVICE, headers=auth_headers(customer))
    assert response.status_code == 403

    response = client.post(f"{API}/services", json={**NEW_SERVICE, "base_price": -5}, headers=auth_headers(admin))
    assert response.status_code == 400

    response = client.post(f"{API}/services", json=NEW_SERVICE, headers=auth_headers(admin))
    assert response.status_code == 201
    service_id = response.json()["data"]["id"]

    response = client.put(f"{API}/services/{service_id}", json={"base_price": 159.0}, headers=auth_headers(admin))
    assert response.json()["data"]["base_price"] == 159.0
    assert response.json()["data"]["name"] == NEW_SERVICE["name"]

    response = client.delete(f"{API}/services/{service_id}", headers=auth_headers(admin))
    assert response.status_code == 200
    assert client.get(f"{API}/services/{service_id}").status_code == 404

def test_service_with_orders_cannot_be_deleted(client, admin, customer, service):
    client.post(f"{API}/orders", json=order_payload(service.id), headers=auth_headers(customer))

    response = client.delete(f"{API}/services/{service.id}", headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete service with existing orders"

def test_popular_services(client, admin, customer, service):
    client.post(f"{API}/services", json=NEW_SERVICE, headers=auth_headers(admin))
    client.post(f"{API}/orders", json=order_payload(service.id), headers=auth_headers(customer))

    response = client.get(f"{API}/services/popular")
    data = response.json()["data"]
    assert data[0]["id"] == service.id
    assert data[0]["order_count"] == 1
    assert data[1]["order_count"] == 0
