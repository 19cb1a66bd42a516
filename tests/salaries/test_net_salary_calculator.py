from decimal import Decimal

from src.hr_portal.hr_portal.salaries.calculator.standard_calculator import StandardSalaryCalculator, net_salary


def test_net_salary_is_basic_plus_bonus_minus_deductions():
    calc = StandardSalaryCalculator()
    assert calc.net_salary(Decimal("5000"), Decimal("200"), Decimal("100")) == Decimal("5100")


def test_net_salary_defaults():
    assert net_salary(Decimal("1234.56")) == Decimal("1234.56")


def test_net_salary_can_go_negative():
    assert net_salary(Decimal("100"), Decimal("0"), Decimal("250.50")) == Decimal("-150.50")


def test_net_salary_keeps_cents_exact():
    assert net_salary(Decimal("0.10"), Decimal("0.20"), Decimal("0")) == Decimal("0.30")
