"""Booking data layer: upstream transport, availability aggregation and auth sessions."""

__version__ = "0.1.0"
