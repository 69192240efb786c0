"""
TrustFlow - Trust Score Service

A FastAPI-based service that scores invoices for the TrustFlow
invoice-financing marketplace and keeps the seller and buyer history
those scores evolve from.
"""

__version__ = "0.1.0"
