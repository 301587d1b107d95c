from decimal import Decimal
from typing import Union

# 10^18 scaling (equivalent to 1e18 in Solidity)
ONE = 10**18


def mul_down(x: int, y: int) -> int:
    """
    Perform fixed-point multiplication (with truncation down).
    Mimics the mulDown function in smart contracts.

    Args:
        x: First operand, 18-decimal fixed point
        y: Second operand, 18-decimal fixed point

    Returns:
        Product in 18-decimal fixed point, rounded down
    """
    return (x * y) // ONE


def div_down(x: int, y: int) -> int:
    """
    Perform fixed-point division (with truncation down).

    Args:
        x: Numerator, 18-decimal fixed point
        y: Denominator, 18-decimal fixed point

    Returns:
        Quotient in 18-decimal fixed point, rounded down

    Raises:
        ZeroDivisionError: If y is zero
    """
    if y == 0:
        raise ZeroDivisionError("Fixed-point division by zero")
    return (x * ONE) // y


def to_fixed(value: Union[int, float, str, Decimal]) -> int:
    """Convert a human-readable ratio (e.g. 0.05) to 18-decimal fixed point."""
    return int(Decimal(str(value)) * ONE)


def from_fixed(value: int) -> float:
    """Convert an 18-decimal fixed-point integer back to a float."""
    return value / ONE
