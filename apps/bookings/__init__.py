"""Bookings app package.

This app encapsulates the booking domain: admission of date ranges
against a property's availability window and its existing bookings,
the booking store, and the REST endpoints for creating, updating and
cancelling bookings. Admissions for one property are serialized by a
row lock on the property taken inside the unit of work.
"""
