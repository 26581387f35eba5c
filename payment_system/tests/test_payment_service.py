import uuid
from decimal import Decimal
from unittest.mock import patch

import pytest

from infrastructure.payments.interface import PaymentException
from infrastructure.payments.mock_provider import MockPaymentProvider
from infrastructure.store import Store
from marketplace.tests.factories import ItemFactory, UserFactory
from payment_system.domain.services.payment_service import PaymentService, _client_amount, to_minor_units
from utils.service_base import ErrorCodes


@pytest.fixture
def provider():
    return MockPaymentProvider()


@pytest.fixture
def payment_service(provider):
    return PaymentService(store=Store(), provider=provider)


@pytest.fixture
def buyer(db):
    return UserFactory()


@pytest.mark.unit
class TestAmountHelpers:
    @pytest.mark.parametrize(
        "total, cents",
        [(Decimal("10.00"), 1000), (Decimal("19.99"), 1999), (Decimal("0.005"), 1), (Decimal("120.50"), 12050)],
    )
    def test_to_minor_units(self, total, cents):
        assert to_minor_units(total) == cents

    @pytest.mark.parametrize(
        "value, expected",
        [(1500, 1500), (1500.0, 1500), ("1500", 1500), (15.5, None), ("15.50", None), (True, None), (None, None)],
    )
    def test_client_amount(self, value, expected):
        assert _client_amount(value) == expected


@pytest.mark.unit
@pytest.mark.django_db
class TestCreatePurchaseIntent:
    def test_matching_amount_creates_intent(self, payment_service, provider, buyer):
        first = ItemFactory(price=Decimal("20.00"))
        second = ItemFactory(price=Decimal("15.50"))

        result = payment_service.create_purchase_intent(buyer, [str(first.pk), str(second.pk)], 3550)

        assert result.ok is True
        assert result.value["paymentIntentId"].startswith("pi_mock_")
        assert result.value["clientSecret"].startswith(result.value["paymentIntentId"])
        assert len(provider.intents) == 1
        intent = provider.intents[0]
        assert intent.amount == 3550
        assert intent.currency == "eur"
        assert intent.metadata["user_id"] == str(buyer.pk)

    def test_repeated_cart_entries_are_each_charged(self, payment_service, buyer):
        item = ItemFactory(price=Decimal("12.00"))

        result = payment_service.create_purchase_intent(buyer, [item.pk, item.pk], 2400)

        assert result.ok is True

    def test_amount_mismatch(self, payment_service, provider, buyer):
        item = ItemFactory(price=Decimal("20.00"))

        result = payment_service.create_purchase_intent(buyer, [item.pk], 1000)

        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert result.to_dict() == {
            "error": ErrorCodes.VALIDATION_ERROR,
            "message": "Amount mismatch between frontend and backend",
            "expected": 2000,
            "received": 1000,
        }
        assert provider.intents == []

    def test_empty_cart(self, payment_service, buyer):
        result = payment_service.create_purchase_intent(buyer, [], 0)

        assert result.error == ErrorCodes.VALIDATION_ERROR
        assert result.error_detail == "Cart is empty"

    def test_unknown_item(self, payment_service, buyer):
        missing = uuid.uuid4()

        result = payment_service.create_purchase_intent(buyer, [missing], 1000)

        assert result.error == ErrorCodes.NOT_FOUND
        assert str(missing) in result.error_detail

    def test_invalid_currency(self, payment_service, buyer):
        item = ItemFactory(price=Decimal("20.00"))

        result = payment_service.create_purchase_intent(buyer, [item.pk], 2000, currency="euro")

        assert result.error == ErrorCodes.VALIDATION_ERROR

    def test_explicit_currency(self, payment_service, provider, buyer):
        item = ItemFactory(price=Decimal("20.00"))

        payment_service.create_purchase_intent(buyer, [item.pk], 2000, currency="USD")

        assert provider.intents[0].currency == "usd"

    def test_provider_failure(self, payment_service, provider, buyer):
        item = ItemFactory(price=Decimal("20.00"))

        with patch.object(provider, "create_payment_intent", side_effect=PaymentException("card network down")):
            result = payment_service.create_purchase_intent(buyer, [item.pk], 2000)

        assert result.error == ErrorCodes.PAYMENT_ERROR
        assert ErrorCodes.status_for(result.error) == 502
        assert result.error_detail == "Failed to create payment intent"
