"""
API tests for estimated prices and the simulated payment flow.
"""

import pytest


@pytest.fixture
def accepted(client, tailor, booking):
    headers, _ = tailor
    resp = client.post(f"/bookings/{booking['id']}/accept", headers=headers)
    assert resp.status_code == 200
    return resp.json()


class TestEstimatedPrice:
    def test_assigned_tailor_sets_price(self, client, tailor, accepted) -> None:
        headers, _ = tailor
        resp = client.put(f"/bookings/{accepted['id']}/price", json={"price": 45}, headers=headers)
        assert resp.status_code == 200
        assert resp.json()["estimated_price"] == 45

    def test_admin_sets_price(self, client, admin, booking) -> None:
        resp = client.put(f"/bookings/{booking['id']}/price", json={"price": 30}, headers=admin)
        assert resp.status_code == 200

    def test_customer_cannot_set_price(self, client, customer, booking) -> None:
        resp = client.put(f"/bookings/{booking['id']}/price", json={"price": 1}, headers=customer)
        assert resp.status_code == 403

    @pytest.mark.parametrize("price", [0, -5])
    def test_price_must_be_positive(self, client, admin, booking, price) -> None:
        resp = client.put(f"/bookings/{booking['id']}/price", json={"price": price}, headers=admin)
        assert resp.status_code == 422

    def test_price_is_frozen_after_payment(self, client, customer, admin, booking) -> None:
        client.put(f"/bookings/{booking['id']}/price", json={"price": 30}, headers=admin)
        client.patch(f"/bookings/{booking['id']}/payment", json={"payment_status": "paid"}, headers=customer)
        resp = client.put(f"/bookings/{booking['id']}/price", json={"price": 35}, headers=admin)
        assert resp.status_code == 409

    def test_cancelled_booking_cannot_be_priced(self, client, customer, admin, booking) -> None:
        client.post(f"/bookings/{booking['id']}/cancel", headers=customer)
        resp = client.put(f"/bookings/{booking['id']}/price", json={"price": 35}, headers=admin)
        assert resp.status_code == 409


class TestPaymentStatus:
    def test_customer_marks_priced_booking_paid(self, client, customer, admin, booking) -> None:
        client.put(f"/bookings/{booking['id']}/price", json={"price": 30}, headers=admin)
        resp = client.patch(f"/bookings/{booking['id']}/payment", json={"payment_status": "paid"}, headers=customer)
        assert resp.status_code == 200
        assert resp.json()["payment_status"] == "paid"
        assert resp.json()["payment_status_label"] == "Paid"

    def test_payment_needs_a_price(self, client, customer, booking) -> None:
        resp = client.patch(f"/bookings/{booking['id']}/payment", json={"payment_status": "paid"}, headers=customer)
        assert resp.status_code == 409

    def test_cancelled_booking_cannot_be_paid(self, client, customer, admin, booking) -> None:
        client.put(f"/bookings/{booking['id']}/price", json={"price": 30}, headers=admin)
        client.post(f"/bookings/{booking['id']}/cancel", headers=customer)
        resp = client.patch(f"/bookings/{booking['id']}/payment", json={"payment_status": "paid"}, headers=customer)
        assert resp.status_code == 409

    def test_tailor_cannot_record_payment(self, client, tailor, admin, accepted) -> None:
        headers, _ = tailor
        client.put(f"/bookings/{accepted['id']}/price", json={"price": 30}, headers=admin)
        resp = client.patch(f"/bookings/{accepted['id']}/payment", json={"payment_status": "paid"}, headers=headers)
        assert resp.status_code == 403

    def test_only_admin_refunds(self, client, customer, admin, booking) -> None:
        bid = booking["id"]
        client.put(f"/bookings/{bid}/price", json={"price": 30}, headers=admin)
        client.patch(f"/bookings/{bid}/payment", json={"payment_status": "paid"}, headers=customer)

        resp = client.patch(f"/bookings/{bid}/payment", json={"payment_status": "refunded"}, headers=customer)
        assert resp.status_code == 403
        resp = client.patch(f"/bookings/{bid}/payment", json={"payment_status": "refunded"}, headers=admin)
        assert resp.status_code == 200
        assert resp.json()["payment_status"] == "refunded"

    def test_refund_requires_payment(self, client, admin, booking) -> None:
        resp = client.patch(f"/bookings/{booking['id']}/payment", json={"payment_status": "refunded"}, headers=admin)
        assert resp.status_code == 409

    def test_paying_twice_conflicts(self, client, customer, admin, booking) -> None:
        bid = booking["id"]
        client.put(f"/bookings/{bid}/price", json={"price": 30}, headers=admin)
        client.patch(f"/bookings/{bid}/payment", json={"payment_status": "paid"}, headers=customer)
        resp = client.patch(f"/bookings/{bid}/payment", json={"payment_status": "paid"}, headers=customer)
        assert resp.status_code == 409
