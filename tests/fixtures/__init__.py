"""Test fixtures for the recurring calendar.

This package provides reusable test fixtures:
- events: Factories for repeat rules, templates, stored events and services
- api: TestClient wired to a fresh CalendarService
"""
