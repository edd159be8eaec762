"""Service layer: business logic for the booking lifecycle."""
