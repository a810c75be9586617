"""
Shared Kernel

Framework-agnostic building blocks used by the properties and bookings
contexts: date handling, the error taxonomy, aggregate/event base classes,
the unit of work and the REST envelope helpers.
"""
