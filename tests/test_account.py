"""Tests for account and event services."""

from datetime import date
from decimal import Decimal

import pytest

from eventledger.domain.entities import EventPricing
from eventledger.domain.errors import ConflictError, NotFoundError, ValidationError
from eventledger.domain.event import EventService
from eventledger.utils.account_resolver import resolve_account


def test_create_account(account_service):
    """Test creating an account linked to a financial account."""
    account_id = account_service.create_account("Annual Dinner", financial_account_id=" MBB-001 ")

    account = account_service.get_account(account_id)
    assert account.name == "Annual Dinner"
    assert account.financial_account_id == "MBB-001"


def test_create_account_without_financial_account(account_service):
    account_id = account_service.create_account("Workshop", financial_account_id="  ")
    assert account_service.get_account(account_id).financial_account_id is None


def test_duplicate_account_name(account_service, sample_account):
    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account(sample_account.name)


def test_blank_account_name(account_service):
    with pytest.raises(ValidationError):
        account_service.create_account("   ")


def test_list_accounts_sorted_by_name(account_service):
    account_service.create_account("Workshop")
    account_service.create_account("Annual Dinner")

    assert [acc.name for acc in account_service.list_accounts()] == ["Annual Dinner", "Workshop"]


def test_resolve_account_by_name_and_id(account_service, sample_account):
    assert resolve_account(account_service, "Annual Dinner") == sample_account.id
    assert resolve_account(account_service, str(sample_account.id)) == sample_account.id
    assert resolve_account(account_service, sample_account.id) == sample_account.id


def test_resolve_unknown_account(account_service):
    with pytest.raises(NotFoundError):
        resolve_account(account_service, "Nope")
    with pytest.raises(NotFoundError):
        resolve_account(account_service, 42)


class TestEventService:
    def test_create_and_get(self, temp_db):
        service = EventService(temp_db)
        pricing = EventPricing(member_price=Decimal("80"), regular_price=Decimal("100"))

        event_id = service.create_event("Annual Dinner", date(2025, 3, 15), pricing)

        event = service.get_event(event_id)
        assert event.name == "Annual Dinner"
        assert event.start_date == date(2025, 3, 15)
        assert event.pricing.tiers()["member"] == Decimal("80")
        assert event.pricing.currency == "RM"

    def test_negative_price_rejected(self, temp_db):
        with pytest.raises(ValidationError):
            EventService(temp_db).create_event("Gala", date(2025, 1, 1), EventPricing(member_price=Decimal("-1")))

    def test_list_most_recent_first(self, temp_db):
        service = EventService(temp_db)
        service.create_event("Old", date(2024, 5, 1))
        service.create_event("New", date(2025, 5, 1))

        assert [event.name for event in service.list_events()] == ["New", "Old"]
