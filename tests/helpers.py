"""
Request helpers shared by the API tests.
"""


def register(client, email="a@x.com", password="secret123", name="Alice"):
    return client.post(
        "/auth/register",
        json={"name": name, "email": email, "password": password},
    )


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}
