import pytest

import uploads
from schemas import CART_SLOTS


PRODUCT = {
    "name": "Striped Blouse",
    "image": "https://res.cloudinary.com/demo/blouse.png",
    "category": "women",
    "new_price": 50.0,
    "old_price": 80.5,
}


def signup(client, email="a@x.com", password="pw123"):
    res = client.post("/signup", json={"username": "alice", "email": email, "password": password})
    assert res.status_code == 200
    return res.json()["token"]


def test_root(client):
    res = client.get("/")
    assert res.status_code == 200
    assert res.text == "Express App is Running"


def test_signup_login_and_cart_flow(client):
    token = signup(client)
    headers = {"auth-token": token}

    res = client.post("/addtocart", json={"itemId": 5}, headers=headers)
    assert res.status_code == 200
    assert res.text == "Added"
    client.post("/addtocart", json={"itemId": 5}, headers=headers)
    res = client.post("/removefromcart", json={"itemId": 5}, headers=headers)
    assert res.text == "Removed"

    res = client.post("/login", json={"email": "a@x.com", "password": "pw123"})
    assert res.json()["success"] is True
    cart = client.post("/getcart", headers={"auth-token": res.json()["token"]}).json()
    assert len(cart) == CART_SLOTS
    assert cart["5"] == 1
    assert sum(cart.values()) == 1


def test_signup_duplicate_email(client):
    signup(client)
    res = client.post("/signup", json={"username": "bob", "email": "a@x.com", "password": "x"})
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Email already registered"}


@pytest.mark.parametrize(
    "body,message",
    [
        ({"email": "nobody@x.com", "password": "pw123"}, "Invalid Email"),
        ({"email": "a@x.com", "password": "wrong"}, "Invalid Password"),
    ],
)
def test_login_failures(client, body, message):
    signup(client)
    res = client.post("/login", json=body)
    assert res.status_code == 401
    assert res.json() == {"success": False, "errors": message}


def test_cart_requires_token(client):
    res = client.post("/getcart")
    assert res.status_code == 401
    assert res.json()["success"] is False

    res = client.post("/addtocart", json={"itemId": 1}, headers={"auth-token": "garbage"})
    assert res.status_code == 401
    assert res.json()["errors"] == "Invalid token"


def test_cart_rejects_out_of_range_slot(client):
    headers = {"auth-token": signup(client)}
    res = client.post("/addtocart", json={"itemId": CART_SLOTS}, headers=headers)
    assert res.status_code == 400
    assert res.json()["success"] is False


def test_malformed_body(client):
    res = client.post("/signup", json={"email": "not-an-email", "password": "pw"})
    assert res.status_code == 400
    body = res.json()
    assert body["success"] is False
    assert body["errors"]


def test_product_endpoints(client):
    res = client.post("/addproduct", json=PRODUCT)
    assert res.json() == {"success": True, "name": "Striped Blouse"}
    client.post("/addproduct", json={**PRODUCT, "name": "Denim Jacket", "category": "men"})

    products = client.get("/allproducts").json()
    assert [p["id"] for p in products] == [1, 2]
    assert products[0]["new_price"] == 50.0

    assert [p["name"] for p in client.get("/newcollections").json()] == ["Striped Blouse", "Denim Jacket"]
    assert [p["name"] for p in client.get("/popularinwomen").json()] == ["Striped Blouse"]

    res = client.post("/removeproduct", json={"id": 1, "name": "Striped Blouse"})
    assert res.json() == {"success": True, "name": "Striped Blouse"}
    assert [p["id"] for p in client.get("/allproducts").json()] == [2]

    res = client.post("/removeproduct", json={"id": 1})
    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "Product not found"}


def test_upload_forwards_to_media_host(client, monkeypatch):
    calls = {}

    def fake_upload(data, **options):
        calls["data"] = data
        calls["options"] = options
        return {"secure_url": "https://res.cloudinary.com/demo/shopp-products/x.png"}

    monkeypatch.setattr(uploads.cloudinary.uploader, "upload", fake_upload)
    res = client.post("/upload", files={"product": ("x.png", b"\x89PNG-data", "image/png")})
    assert res.status_code == 200
    assert res.json() == {"success": 1, "image_url": "https://res.cloudinary.com/demo/shopp-products/x.png"}
    assert calls["data"] == b"\x89PNG-data"
    assert calls["options"]["folder"] == "shopp-products"
    assert calls["options"]["allowed_formats"] == ["jpg", "png", "jpeg"]


def test_upload_rejects_non_image(client):
    res = client.post("/upload", files={"product": ("notes.txt", b"hello", "text/plain")})
    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "File must be an image"}


def test_upload_media_host_failure(client, monkeypatch):
    def broken_upload(data, **options):
        raise RuntimeError("boom")

    monkeypatch.setattr(uploads.cloudinary.uploader, "upload", broken_upload)
    res = client.post("/upload", files={"product": ("x.png", b"data", "image/png")})
    assert res.status_code == 502
    assert res.json()["success"] is False


@pytest.mark.parametrize("item_id", [True, "5", 5.0])
def test_cart_rejects_non_integer_item_id(client, item_id):
    headers = {"auth-token": signup(client)}
    res = client.post("/addtocart", json={"itemId": item_id}, headers=headers)
    assert res.status_code == 400
    assert res.json()["success"] is False
    assert sum(client.post("/getcart", headers=headers).json().values()) == 0
