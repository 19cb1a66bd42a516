from __future__ import annotations

from decimal import Decimal

from .base import SalaryCalculator


def net_salary(basic_salary: Decimal, bonus: Decimal = Decimal("0"), deductions: Decimal = Decimal("0")) -> Decimal:
    """basic + bonus - deductions, no rounding beyond the inputs' precision."""
    return basic_salary + bonus - deductions


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule: net = basic + bonus - deductions (may go below 0)."""

    def net_salary(self, basic_salary: Decimal, bonus: Decimal, deductions: Decimal) -> Decimal:
        return net_salary(basic_salary, bonus, deductions)
