"""
Luxe & Lush storefront core

Cart model, order builder, payment backend client, hosted checkout handoff
and order status reconciliation.
"""

__version__ = "1.0.0"
