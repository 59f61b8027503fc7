"""
Warehouse Analytics

Customer and product reports over a star-schema sales warehouse.
"""

__version__ = "1.0.0"
