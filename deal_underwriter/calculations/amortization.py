"""
Loan Amortization Calculations

Level-payment loan math for acquisition debt: monthly payment, closed-form
remaining balance, and a month-by-month schedule for reporting.
"""

from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta


def calculate_payment(
    principal: float, annual_rate: float, amortization_years: int
) -> float:
    """
    Calculate monthly loan payment.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal (e.g., 0.05 for 5%)
        amortization_years: Amortization period in years

    Returns:
        Monthly payment amount (positive number)
    """
    months = amortization_years * 12
    if principal <= 0:
        return 0.0
    if months <= 0:
        return 0.0

    monthly_rate = annual_rate / 12

    if monthly_rate == 0:
        return principal / months

    return principal * monthly_rate / (1 - (1 + monthly_rate) ** -months)


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_years: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N monthly payments."""
    months = amortization_years * 12
    if principal <= 0 or months <= 0:
        return 0.0

    monthly_rate = annual_rate / 12

    if monthly_rate == 0:
        return max(0.0, principal * (1 - payments_completed / months))

    payment = calculate_payment(principal, annual_rate, amortization_years)
    try:
        growth = (1 + monthly_rate) ** payments_completed
    except OverflowError:
        # Payments only just cover interest at this rate
        return principal if payments_completed < months else 0.0
    balance = principal * growth - payment * ((growth - 1) / monthly_rate)

    return max(0.0, balance)


def calculate_annual_debt_service(
    principal: float, annual_rate: float, amortization_years: int
) -> float:
    """Twelve monthly payments."""
    return calculate_payment(principal, annual_rate, amortization_years) * 12


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    amortization_years: int,
    total_months: Optional[int] = None,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a monthly amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate as decimal
        amortization_years: Amortization period in years
        total_months: Months to generate (defaults to the full amortization)
        start_date: Date of first payment

    Returns:
        List of amortization rows
    """
    schedule = []
    if principal <= 0 or amortization_years <= 0:
        return schedule

    balance = principal
    monthly_rate = annual_rate / 12
    payment = calculate_payment(principal, annual_rate, amortization_years)

    if total_months is None:
        total_months = amortization_years * 12

    if start_date is None:
        start_date = date.today()

    for period in range(1, total_months + 1):
        period_date = start_date + relativedelta(months=period - 1)

        interest = balance * monthly_rate
        principal_pmt = min(payment - interest, balance)
        ending_balance = balance - principal_pmt

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": round(balance, 2),
                "payment": round(principal_pmt + interest, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(max(0, ending_balance), 2),
            }
        )

        balance = max(0.0, ending_balance)

        # Stop if balance is paid off
        if balance == 0:
            break

    return schedule


def yearly_debt_summary(schedule: List[Dict]) -> List[Dict]:
    """
    Aggregate a monthly schedule by loan year.

    Returns:
        Rows with year, debt_service, interest, principal, ending_balance
    """
    yearly: List[Dict] = []
    for row in schedule:
        year = (row["period"] - 1) // 12 + 1
        if not yearly or yearly[-1]["year"] != year:
            yearly.append(
                {
                    "year": year,
                    "debt_service": 0.0,
                    "interest": 0.0,
                    "principal": 0.0,
                    "ending_balance": 0.0,
                }
            )
        current = yearly[-1]
        current["debt_service"] += row["payment"]
        current["interest"] += row["interest"]
        current["principal"] += row["principal"]
        current["ending_balance"] = row["ending_balance"]

    for year in yearly:
        for key in ("debt_service", "interest", "principal"):
            year[key] = round(year[key], 2)

    return yearly


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over the schedule."""
    return sum(row["interest"] for row in schedule)
