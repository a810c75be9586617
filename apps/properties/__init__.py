"""Properties app package.

Owns rental property listings: the nightly price, the availability window
bookings must fall inside, and the listing status. Properties are archived
rather than deleted.
"""
