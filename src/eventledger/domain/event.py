"""Event domain service."""

from datetime import date
from typing import Optional

from eventledger.database.base import Database
from eventledger.domain.entities import Event, EventPricing
from eventledger.domain.validation import require_amount, require_text


class EventService:
    """Service for managing events and their price tables."""

    def __init__(self, db: Database):
        self.db = db

    def create_event(self, name: str, start_date: date, pricing: Optional[EventPricing] = None) -> int:
        """Create an event.

        Args:
            name: Event name
            start_date: Day the event takes place
            pricing: Ticket price table, all tiers zero if omitted

        Returns:
            Event ID

        Raises:
            ValidationError: If name is blank or a price is negative
        """
        name = require_text(name, "name")
        pricing = pricing or EventPricing()
        for price in pricing.tiers().values():
            require_amount(price)
        return self.db.create_event(name=name, start_date=start_date, pricing=pricing)

    def get_event(self, event_id: int) -> Optional[Event]:
        return self.db.get_event(event_id)

    def list_events(self) -> list[Event]:
        return self.db.list_events()
