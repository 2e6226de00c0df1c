"""Aggregate application use cases."""
