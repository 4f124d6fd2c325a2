"""Booking request validation, payload mapping and the upstream rates client."""
