"""Listings marketplace API."""
