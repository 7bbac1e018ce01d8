"""
Flight Reservation Ledger

An in-memory passenger reservation system that loads a passenger manifest,
assigns passengers to numbered trips by seat capacity, resolves seat conflicts
and serves lookup, cancellation and reporting operations.
"""

__version__ = "1.0.0"
__author__ = "Flight Ledger Team"
