"""
Luxe & Lush payment API

Creates payment orders with Cashfree, reports order status and applies
payment webhooks.
"""

__version__ = "1.0.0"
