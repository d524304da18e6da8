import pytest

from conftest import paystack_response, verified_payload
from expressmart.domain.errors import PaystackError
from expressmart.services.paystack_client import PaystackClient

PAYSTACK_GET = "expressmart.services.paystack_client.requests.get"


@pytest.fixture
def client():
    return PaystackClient(secret_key="sk_test_secret", base_url="https://api.paystack.test/", timeout=5)


def test_verify_returns_transaction_data(client, mocker):
    get = mocker.patch(PAYSTACK_GET, return_value=paystack_response(verified_payload("ref-42")))

    data = client.verify_transaction("ref-42")

    assert data["reference"] == "ref-42"
    assert data["status"] == "success"
    get.assert_called_once_with(
        "https://api.paystack.test/transaction/verify/ref-42",
        headers={"Authorization": "Bearer sk_test_secret"},
        timeout=5,
    )


def test_reference_is_url_quoted(client, mocker):
    get = mocker.patch(PAYSTACK_GET, return_value=paystack_response(verified_payload()))

    client.verify_transaction("a/b c")

    assert get.call_args.args[0].endswith("/transaction/verify/a%2Fb%20c")


def test_http_error_raises(client, mocker):
    mocker.patch(PAYSTACK_GET, return_value=paystack_response({"status": True, "data": {"status": "success"}}, 500))

    with pytest.raises(PaystackError, match="Payment verification failed"):
        client.verify_transaction("ref")


def test_non_json_body_raises(client, mocker):
    resp = paystack_response(None, 502)
    resp.json.side_effect = ValueError("no json")
    mocker.patch(PAYSTACK_GET, return_value=resp)

    with pytest.raises(PaystackError, match="Payment verification failed"):
        client.verify_transaction("ref")


def test_failed_transaction_status_raises_with_status(client, mocker):
    mocker.patch(PAYSTACK_GET, return_value=paystack_response(verified_payload(status="abandoned")))

    with pytest.raises(PaystackError) as exc_info:
        client.verify_transaction("ref")

    assert str(exc_info.value) == "Payment status is abandoned"
    assert exc_info.value.payload["data"]["status"] == "abandoned"


def test_non_object_body_raises(client, mocker):
    mocker.patch(PAYSTACK_GET, return_value=paystack_response(["unexpected"]))

    with pytest.raises(PaystackError, match="Payment verification failed"):
        client.verify_transaction("ref")


def test_non_object_data_raises(client, mocker):
    mocker.patch(PAYSTACK_GET, return_value=paystack_response({"status": True, "data": "success"}))

    with pytest.raises(PaystackError, match="Payment status is None"):
        client.verify_transaction("ref")
