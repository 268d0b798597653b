from models.users import User
from utils.hashing import verify_password
from helpers import login


def new_user(**overrides):
    data = {
        "name": "Carla Souza",
        "nickname": "Carla",
        "username": "carla",
        "password": "inicial",
        "role": "armazenista",
    }
    data.update(overrides)
    return data


def test_user_routes_are_admin_only(worker_client, client):
    assert worker_client.get("/api/users").status_code == 403
    assert worker_client.post("/api/users", json=new_user()).status_code == 403
    assert client.get("/api/users").status_code == 401


def test_forbidden_message(worker_client):
    assert worker_client.get("/api/users").json() == {"message": "Admin access required"}


def test_list_users_ordered_by_name_without_passwords(admin_client, worker_user):
    response = admin_client.get("/api/users")
    assert response.status_code == 200
    users = response.json()
    assert [u["name"] for u in users] == ["Ana Admin", "Bruno Worker"]
    assert all("password" not in u for u in users)


def test_create_user_hashes_password(admin_client, db):
    response = admin_client.post("/api/users", json=new_user())
    assert response.status_code == 200
    body = response.json()
    assert body["username"] == "carla"
    assert body["isFirstLogin"] is True
    assert "password" not in body

    stored = db.query(User).filter(User.username == "carla").one()
    assert stored.password != "inicial"
    assert verify_password("inicial", stored.password)


def test_created_user_can_log_in_with_first_login_flag(admin_client, client):
    admin_client.post("/api/users", json=new_user())
    response = login(client, "carla", "inicial")
    assert response.status_code == 200
    assert response.json()["isFirstLogin"] is True


def test_create_duplicate_username_is_400(admin_client):
    response = admin_client.post("/api/users", json=new_user(username="ana"))
    assert response.status_code == 400
    assert response.json() == {"message": "Username already exists"}


def test_create_user_invalid_role_is_400(admin_client):
    response = admin_client.post("/api/users", json=new_user(role="gerente"))
    assert response.status_code == 400


def test_create_user_missing_name_is_400(admin_client):
    data = new_user()
    del data["name"]
    assert admin_client.post("/api/users", json=data).status_code == 400


def test_get_user(admin_client, worker_user):
    response = admin_client.get(f"/api/users/{worker_user.id}")
    assert response.status_code == 200
    assert response.json()["nickname"] == "Bruno"


def test_get_missing_user_is_404(admin_client):
    response = admin_client.get("/api/users/9999")
    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}


def test_partial_update_keeps_other_fields(admin_client, worker_user):
    response = admin_client.put(f"/api/users/{worker_user.id}", json={"nickname": "Bru"})
    assert response.status_code == 200
    body = response.json()
    assert body["nickname"] == "Bru"
    assert body["name"] == "Bruno Worker"
    assert body["role"] == "armazenista"


def test_update_password_is_rehashed(admin_client, worker_user, client, db):
    admin_client.put(f"/api/users/{worker_user.id}", json={"password": "trocada"})

    db.expire_all()
    stored = db.get(User, worker_user.id)
    assert verify_password("trocada", stored.password)
    assert login(client, "bruno", "trocada").status_code == 200


def test_update_to_taken_username_is_400(admin_client, worker_user):
    response = admin_client.put(f"/api/users/{worker_user.id}", json={"username": "ana"})
    assert response.status_code == 400
    assert response.json()["message"] == "Username already exists"


def test_update_keeping_own_username_is_allowed(admin_client, worker_user):
    response = admin_client.put(f"/api/users/{worker_user.id}", json={"username": "bruno"})
    assert response.status_code == 200


def test_update_missing_user_is_404(admin_client):
    assert admin_client.put("/api/users/9999", json={"name": "X"}).status_code == 404


def test_delete_user(admin_client, worker_user):
    response = admin_client.delete(f"/api/users/{worker_user.id}")
    assert response.status_code == 200
    assert response.json() == {"message": "User deleted successfully"}
    assert admin_client.get(f"/api/users/{worker_user.id}").status_code == 404


def test_delete_missing_user_is_404(admin_client):
    assert admin_client.delete("/api/users/9999").status_code == 404


def test_admin_cannot_delete_self(admin_client, admin_user):
    response = admin_client.delete(f"/api/users/{admin_user.id}")
    assert response.status_code == 400
    assert response.json() == {"message": "You cannot delete your own account"}


def test_create_user_password_over_72_bytes_is_400(admin_client, db):
    # 40 characters but 80 bytes in UTF-8
    response = admin_client.post("/api/users", json=new_user(password="é" * 40))
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request data"
    assert db.query(User).filter(User.username == "carla").count() == 0


def test_create_user_password_of_exactly_72_bytes(admin_client, client):
    password = "é" * 36
    assert admin_client.post("/api/users", json=new_user(password=password)).status_code == 200
    assert login(client, "carla", password).status_code == 200


def test_update_user_password_over_72_bytes_is_400(admin_client, worker_user):
    response = admin_client.put(f"/api/users/{worker_user.id}", json={"password": "é" * 40})
    assert response.status_code == 400
