"""Side-by-side scenario comparison."""
from __future__ import annotations

from typing import Sequence

import pandas as pd

from loanquote.engine import calculate_scenario
from loanquote.models import Scenario

METRICS = [
    "Purchase Price",
    "Down Payment",
    "Loan Type",
    "Interest Rate",
    "Monthly Payment",
    "Total Closing Costs",
    "Cash to Close",
]


def _column_names(scenarios: Sequence[Scenario]) -> list:
    names = []
    for i, s in enumerate(scenarios, start=1):
        name = s.name or f"Scenario {i}"
        if name in names:
            name = f"{name} ({i})"
        names.append(name)
    return names


def compare_scenarios(scenarios: Sequence[Scenario]) -> pd.DataFrame:
    """Calculate each scenario and tabulate the headline figures.

    Rows are metrics and columns are scenario names.  Duplicate names get
    their position appended so no column is lost.
    """

    columns = {}
    for name, scenario in zip(_column_names(scenarios), scenarios):
        res = calculate_scenario(scenario)
        columns[name] = [
            scenario.purchase_price,
            res.down_payment_required,
            scenario.loan_type.value,
            scenario.interest_rate,
            res.total_monthly_payment,
            res.total_closing_costs,
            res.cash_to_close,
        ]
    return pd.DataFrame(columns, index=METRICS)
