# test/test_users_api.py

from conftest import PASSWORD, auth_headers, order_payload
from flashfix.models import UserRole

API = "/api/v1"


def test_users_require_login(client):
    assert client.get(f"{API}/users").status_code == 401

def test_admin_lists_and_filters_users(client, admin, customer, technicians):
    response = client.get(f"{API}/users", headers=auth_headers(admin))
    assert response.status_code == 200
    assert response.json()["pagination"]["total"] == 5

    response = client.get(f"{API}/users?role=technician", headers=auth_headers(admin))
    assert response.json()["pagination"]["total"] == 3

    response = client.get(f"{API}/users?search=Customer", headers=auth_headers(admin))
    assert [user["id"] for user in response.json()["data"]] == [customer.id]

    response = client.get(f"{API}/users", headers=auth_headers(customer))
    assert response.status_code == 403

def test_technicians_and_stats(client, admin, customer, technicians):
    response = client.get(f"{API}/users/technicians", headers=auth_headers(admin))
    assert sorted(user["id"] for user in response.json()["data"]) == sorted(t.id for t in technicians)

    response = client.get(f"{API}/users/stats", headers=auth_headers(admin))
    stats = response.json()["data"]
    assert stats["total"] == 5
    assert stats["technicians"] == 3
    assert stats["customers"] == 1
    assert stats["admins"] == 1
    assert stats["new_users_this_month"] == 5

def test_admin_creates_staff_user(client, admin):
    payload = {"name": "Finance Officer", "phone": "13600000001", "password": "abcdef", "role": "finance"}
    response = client.post(f"{API}/users", json=payload, headers=auth_headers(admin))
    assert response.status_code == 201
    assert response.json()["data"]["role"] == "finance"

    response = client.post(f"{API}/users", json=payload, headers=auth_headers(admin))
    assert response.status_code == 409

def test_self_or_admin_access(client, make_user, admin, customer):
    other = make_user(UserRole.CUSTOMER, name="Other")

    assert client.get(f"{API}/users/{customer.id}", headers=auth_headers(customer)).status_code == 200
    assert client.get(f"{API}/users/{other.id}", headers=auth_headers(customer)).status_code == 403
    assert client.get(f"{API}/users/{other.id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"{API}/users/999", headers=auth_headers(admin)).status_code == 404

def test_only_admin_changes_role(client, admin, customer):
    response = client.put(f"{API}/users/{customer.id}", json={"role": "admin"}, headers=auth_headers(customer))
    assert response.status_code == 403

    response = client.put(f"{API}/users/{customer.id}", json={"email": "a@b.co"}, headers=auth_headers(customer))
    assert response.json()["data"]["email"] == "a@b.co"

    response = client.put(f"{API}/users/{customer.id}", json={"role": "technician"}, headers=auth_headers(admin))
    assert response.json()["data"]["role"] == "technician"

def test_delete_user_rules(client, make_user, admin, customer, service):
    assert client.delete(f"{API}/users/{admin.id}", headers=auth_headers(admin)).status_code == 400

    client.post(f"{API}/orders", json=order_payload(service.id), headers=auth_headers(customer))
    response = client.delete(f"{API}/users/{customer.id}", headers=auth_headers(admin))
    assert response.status_code == 400

    idle = make_user(UserRole.CUSTOMER, name="Idle")
    assert client.delete(f"{API}/users/{idle.id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"{API}/users/{idle.id}", headers=auth_headers(admin)).status_code == 404

def test_reset_password(client, admin, customer):
    response = client.put(
        f"{API}/users/{customer.id}/reset-password",
        json={"newPassword": "resetme"},
        headers=auth_headers(admin),
    )
    assert response.status_code == 200

    response = client.post(f"{API}/auth/login", json={"phone": customer.phone, "password": PASSWORD})
    assert response.status_code == 401
    response = client.post(f"{API}/auth/login", json={"phone": customer.phone, "password": "resetme"})
    assert response.status_code == 200

def test_user_referenced_by_order_logs_cannot_be_deleted(client, make_user, admin, customer, technicians, service):
    other_admin = make_user(UserRole.ADMIN, name="Second Admin")
    response = client.post(f"{API}/orders", json=order_payload(service.id), headers=auth_headers(customer))
    order_url = f"{API}/orders/{response.json()['data']['id']}"

    # แอดมินมอบหมายงาน ช่างรับแล้วปล่อยคืน ทั้งสองคนเหลือแค่ log ในออเดอร์
    client.put(f"{order_url}/assign", json={"technicianId": technicians[0].id}, headers=auth_headers(admin))
    client.put(f"{order_url}/accept", headers=auth_headers(technicians[0]))
    client.put(f"{order_url}/transfer", headers=auth_headers(technicians[0]))

    for user in (admin, technicians[0]):
        response = client.delete(f"{API}/users/{user.id}", headers=auth_headers(other_admin))
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete user with existing orders"
