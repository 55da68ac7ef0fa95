"""
Revenue assumptions.
"""
from typing import Union

Number = Union[int, float]


def effective_monthly_fee(avg_client_fee: Number, fee_is_annual: bool = False) -> float:
    """Fee per client per month. Annual fees are spread over 12 months."""
    return avg_client_fee / 12 if fee_is_annual else float(avg_client_fee)


def monthly_revenue(active_clients: Number, avg_client_fee: Number, fee_is_annual: bool = False) -> float:
    return active_clients * effective_monthly_fee(avg_client_fee, fee_is_annual)
