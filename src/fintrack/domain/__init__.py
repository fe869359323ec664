"""Domain layer for fintrack application.

Services are imported from their modules directly; the storage layer
imports entities from here, so nothing is re-exported.
"""
