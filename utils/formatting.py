"""
Formatting utilities.
"""

from typing import Optional


def format_currency(amount: Optional[float], currency: str = "USD") -> str:
    """
    Format an amount as currency in whole units.

    Args:
        amount: The amount (e.g., dollars, not cents). None renders as "-".
        currency: Currency code (default USD).

    Returns:
        Formatted currency string.
    """
    if amount is None:
        return "-"
    symbols = {
        "USD": "$",
        "GBP": "£",
        "EUR": "€",
    }
    symbol = symbols.get(currency, currency + " ")
    return f"{symbol}{round(amount):,}"


def format_area(value: Optional[float]) -> str:
    """Format an improvement area in square feet."""
    if value is None:
        return "-"
    return f"{round(value):,} sqft"
