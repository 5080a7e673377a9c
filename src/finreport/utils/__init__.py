"""Utility functions for finreport."""

from finreport.utils.amount_parser import parse_amount, parse_balance_amount

__all__ = ["parse_amount", "parse_balance_amount"]
