from fastapi.testclient import TestClient

ADMIN_PASSWORD = "admin123"
WORKER_PASSWORD = "worker123"


def login(client: TestClient, username: str, password: str):
    return client.post("/api/auth/login", json={"username": username, "password": password})
