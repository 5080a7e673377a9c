"""Domain layer for finreport application."""
