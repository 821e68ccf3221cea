"""Concrete storage, routing, scheduling and ID adapters."""
