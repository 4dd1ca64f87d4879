from sqlmodel import select

from app.models.payment import Payment
from app.models.service_request import RequestStatus


def _create_payment(client, request_id, headers):
    return client.post(f"/payments/create/{request_id}", headers=headers)


def test_customer_pays_completed_request(client, customer, make_request, auth_headers):
    record = make_request(RequestStatus.COMPLETED)

    response = _create_payment(client, record.id, auth_headers(customer))

    assert response.status_code == 201
    payment = response.json()
    assert payment["request_id"] == record.id
    assert payment["amount"] == 25.0
    assert payment["status"] == "pending"
    assert payment["provider"] == "manual"


def test_payment_requires_completed_request(client, customer, make_request, auth_headers):
    record = make_request(RequestStatus.IN_PROGRESS)

    response = _create_payment(client, record.id, auth_headers(customer))

    assert response.status_code == 400
    assert response.json()["status"] == "fail"


def test_payment_for_unknown_request(client, customer, auth_headers):
    assert _create_payment(client, 999, auth_headers(customer)).status_code == 404


def test_only_the_booking_customer_pays(client, add_user, make_request, auth_headers):
    stranger = add_user("Sam Stranger", "sam@example.com", "customer")
    record = make_request(RequestStatus.COMPLETED)

    assert _create_payment(client, record.id, auth_headers(stranger)).status_code == 403


def test_second_pending_payment_is_rejected(client, session, customer, make_request, auth_headers):
    record = make_request(RequestStatus.COMPLETED)
    headers = auth_headers(customer)

    assert _create_payment(client, record.id, headers).status_code == 201
    response = _create_payment(client, record.id, headers)

    assert response.status_code == 400
    assert response.json() == {
        "status": "fail",
        "message": "A pending payment already exists for this service request.",
    }
    payments = session.exec(select(Payment).where(Payment.request_id == record.id)).all()
    assert len(payments) == 1


def test_confirmation_moves_request_to_payment_completed(
    client, customer, provider, make_request, stored_status, auth_headers
):
    record = make_request(RequestStatus.COMPLETED)
    payment_id = _create_payment(client, record.id, auth_headers(customer)).json()["id"]

    response = client.patch(f"/payments/{payment_id}/confirm", headers=auth_headers(provider))

    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    assert response.json()["paid_at"] is not None
    assert stored_status(record.id) == RequestStatus.PAYMENT_COMPLETED

    # PaymentCompleted is terminal for providers too
    response = client.patch(
        f"/service-requests/{record.id}/provider", json={"status": "completed"}, headers=auth_headers(provider)
    )
    assert response.status_code == 400


def test_confirming_twice_fails(client, customer, provider, make_request, auth_headers):
    record = make_request(RequestStatus.COMPLETED)
    payment_id = _create_payment(client, record.id, auth_headers(customer)).json()["id"]

    client.patch(f"/payments/{payment_id}/confirm", headers=auth_headers(provider))
    response = client.patch(f"/payments/{payment_id}/confirm", headers=auth_headers(provider))

    assert response.status_code == 400


def test_confirmation_by_other_provider_is_forbidden(
    client, session, customer, other_provider, make_request, stored_status, auth_headers
):
    record = make_request(RequestStatus.COMPLETED)
    payment_id = _create_payment(client, record.id, auth_headers(customer)).json()["id"]

    response = client.patch(f"/payments/{payment_id}/confirm", headers=auth_headers(other_provider))

    assert response.status_code == 403
    assert stored_status(record.id) == RequestStatus.COMPLETED
    assert session.get(Payment, payment_id).status == "pending"


def test_confirmation_rejected_when_request_moved_back_out_of_completed(
    client, session, customer, provider, make_request, stored_status, auth_headers
):
    record = make_request(RequestStatus.COMPLETED)
    payment_id = _create_payment(client, record.id, auth_headers(customer)).json()["id"]

    # request state drifted after the payment was opened
    record.status = RequestStatus.IN_PROGRESS
    session.add(record)
    session.commit()

    response = client.patch(f"/payments/{payment_id}/confirm", headers=auth_headers(provider))

    assert response.status_code == 400
    assert stored_status(record.id) == RequestStatus.IN_PROGRESS
    session.expire_all()
    assert session.get(Payment, payment_id).status == "pending"


def test_unknown_payment(client, provider, auth_headers):
    assert client.patch("/payments/31337/confirm", headers=auth_headers(provider)).status_code == 404
