import uuid
from decimal import Decimal
from unittest.mock import MagicMock

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import expressmart.data.models  # noqa: F401
from expressmart.api import create_app
from expressmart.data.database import Base, get_db
from expressmart.data.models import CartItemModel, CartModel, ProductModel
from expressmart.utils.settings import Settings, get_settings

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

TEST_SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def db_session():
    """
    Nowa, izolowana baza in-memory dla każdego testu.
    """
    engine = create_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def settings():
    return Settings(
        database_url=TEST_SQLALCHEMY_DATABASE_URL,
        paystack_secret_key="sk_test_secret",
        paystack_base_url="https://api.paystack.test",
        jwt_secret=JWT_SECRET,
        fcm_project_id="expressmart-test",
        expo_project_id="expo-project-id",
        firebase_project_id="firebase-project-id",
    )


@pytest.fixture(autouse=True)
def order_notification_delay(mocker):
    # broker Celery nie jest dostępny w testach
    return mocker.patch(
        "expressmart.services.notification_service.send_order_notification_task.delay"
    )


@pytest.fixture
def app(db_session, settings):
    app = create_app()

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


def make_token(user_id, email="buyer@example.com", secret=JWT_SECRET, audience="authenticated", **claims):
    payload = {"sub": str(user_id), "email": email, "aud": audience, **claims}
    return jwt.encode(payload, secret, algorithm="HS256")


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def cart_with_items(db_session, user_id):
    """
    Koszyk: 2 x 10.00 (rozmiar M, czerwony) + 1 x 5.00 (bez thumbnaila).
    """
    shirt = ProductModel(title="T-Shirt", price=Decimal("10.00"), thumbnail="https://cdn.test/shirt.png", images=[])
    socks = ProductModel(title="Socks", price=Decimal("5.00"), thumbnail=None, images=["https://cdn.test/socks-1.png"])
    cart = CartModel(user_id=user_id)
    db_session.add_all([shirt, socks, cart])
    db_session.flush()

    db_session.add_all(
        [
            CartItemModel(cart_id=cart.id, product_id=shirt.id, quantity=2, size="M", color="red"),
            CartItemModel(cart_id=cart.id, product_id=socks.id, quantity=1),
        ]
    )
    db_session.commit()
    return cart


def paystack_response(payload, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload
    return resp


def verified_payload(reference="express_ref_1", status="success"):
    return {
        "status": True,
        "message": "Verification successful",
        "data": {
            "id": 4099260516,
            "status": status,
            "reference": reference,
            "amount": 2800,
            "currency": "GHS",
            "channel": "card",
        },
    }
