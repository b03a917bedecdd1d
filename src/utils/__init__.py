"""Formatting and date helpers shared by services and pages."""
