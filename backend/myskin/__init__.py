"""MySkin Aesthetics clinic backend: storefront, bookings and admin API."""

__version__ = "1.0.0"
