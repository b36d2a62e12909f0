"""Approval gating for collateral-backed minting"""

from typing import Optional


def needs_approval(amount: int, allowance: Optional[int]) -> bool:
    """
    Decide whether the collateral allowance must be raised before minting.

    Requirements:
    - Unknown allowance (no snapshot yet) always requires approval
    - Otherwise approval is needed only for a positive amount above the allowance
    """
    if allowance is None:
        return True
    return amount > 0 and allowance < amount


def expiration_ledger(latest_ledger: int, horizon: int) -> int:
    """Absolute ledger sequence at which a newly granted allowance lapses"""
    return latest_ledger + horizon
