from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from loanquote.presets import DEFAULT_CLOSING_COSTS, DEFAULT_SCENARIO
from loanquote.utils import nz, parse_iso_date


class LoanType(str, Enum):
    CONVENTIONAL = "Conventional"
    FHA = "FHA"
    VA = "VA"
    JUMBO = "Jumbo"


class Occupancy(str, Enum):
    PRIMARY = "Primary Residence"
    SECOND_HOME = "Second Home"
    INVESTMENT = "Investment Property"


class LenderCreditMode(str, Enum):
    FIXED = "fixed"
    PERCENT = "percent"


class BuydownType(str, Enum):
    TWO_ONE = "2-1"
    ONE_ZERO = "1-0"
    ONE_ONE = "1-1"
    THREE_TWO_ONE = "3-2-1"


def _missing(v) -> bool:
    return v is None or (isinstance(v, float) and math.isnan(v))


class _Coerced(BaseModel):
    """Base model that turns unusable numeric input into zero.

    Required numbers fall back to ``0``; optional numbers keep ``None`` as
    "not supplied" and otherwise go through the same coercion.
    """

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_numbers(cls, v, info: ValidationInfo):
        field = cls.model_fields[info.field_name]
        annotation = field.annotation
        if annotation in (str, bool) and _missing(v):
            return field.get_default()
        if annotation is float:
            return nz(v)
        if annotation is int:
            return int(nz(v))
        if annotation == Optional[float]:
            if v is None or v == "":
                return None
            return nz(v)
        return v


class ClosingCostItem(_Coerced):
    """A closing cost line.

    ``amount`` is dollars when ``is_fixed`` is true, otherwise a percentage.
    ``months`` drives reserve items and ``days`` the prepaid interest item.
    """

    id: str = ""
    name: str = ""
    category: str = ""
    amount: float = 0.0
    is_fixed: bool = True
    months: Optional[float] = None
    days: Optional[float] = None


class DPAConfig(_Coerced):
    active: bool = False
    amount: float = 0.0
    rate: float = 0.0
    term_months: int = 0
    is_deferred: bool = False


class BuydownConfig(BaseModel):
    active: bool = False
    type: BuydownType = BuydownType.TWO_ONE


class IncomeConfig(_Coerced):
    """Monthly qualifying income by source."""

    borrower1: float = 0.0
    borrower2: float = 0.0
    rental: float = 0.0
    other: float = 0.0


class DebtConfig(_Coerced):
    monthly_total: float = 0.0


class Scenario(_Coerced):
    """A complete loan scenario as entered by the originator."""

    model_config = ConfigDict(frozen=True)

    name: str = "New Scenario"
    client_name: str = ""
    purchase_price: float = 0.0
    earnest_money: float = 0.0
    down_payment_amount: float = 0.0
    down_payment_percent: float = 0.0
    loan_type: LoanType = LoanType.CONVENTIONAL
    occupancy_type: Occupancy = Occupancy.PRIMARY
    number_of_units: int = 1
    interest_rate: float = 0.0
    loan_term_months: int = 360
    interest_only: bool = False
    is_dscr_loan: bool = False
    credit_score: int = 0
    manual_mi: Optional[float] = None
    ufmip_rate: float = 0.0
    settlement_date: Optional[date] = None

    seller_concessions: float = 0.0
    show_seller_concessions: bool = False
    lender_credits: float = 0.0
    lender_credits_mode: LenderCreditMode = LenderCreditMode.FIXED
    show_lender_credits: bool = False

    property_tax_yearly: float = 0.0
    home_insurance_yearly: float = 0.0
    hoa_monthly: float = 0.0

    income: IncomeConfig = Field(default_factory=IncomeConfig)
    debts: DebtConfig = Field(default_factory=DebtConfig)
    closing_costs: List[ClosingCostItem] = Field(default_factory=list)
    buydown: BuydownConfig = Field(default_factory=BuydownConfig)
    dpa: DPAConfig = Field(default_factory=DPAConfig)
    dpa2: Optional[DPAConfig] = None
    notes: str = ""

    @field_validator("settlement_date", mode="before")
    @classmethod
    def _lenient_date(cls, v):
        return parse_iso_date(v)

    @field_validator("number_of_units", mode="after")
    @classmethod
    def _units_in_range(cls, v: int) -> int:
        return min(4, max(1, v))


def default_scenario(**overrides) -> Scenario:
    """Return the default purchase scenario with ``overrides`` applied."""

    data = dict(DEFAULT_SCENARIO)
    data["closing_costs"] = [dict(c) for c in DEFAULT_CLOSING_COSTS]
    data.update(overrides)
    return Scenario.model_validate(data)


class BuydownYear(BaseModel):
    year: int
    rate: float
    payment: float
    subsidy: float
    full_payment: float


class DTIRatios(BaseModel):
    front_end: float = 0.0
    back_end: float = 0.0


class AffordabilityResult(BaseModel):
    """Reverse affordability for one qualifying rule set."""

    program: str
    max_front_end_pct: float
    max_back_end_pct: float
    front_end_ceiling: float = 0.0
    back_end_ceiling: float = 0.0
    limiting_factor: Optional[Literal["Front-End", "Back-End"]] = None
    max_housing_payment: float = 0.0
    ratio: float = 0.0
    max_price: float = 0.0
    max_loan: float = 0.0
    passes: bool = False
    steps: List[str] = Field(default_factory=list)


class ScenarioWarnings(BaseModel):
    excess_concessions: bool = False
    excess_dpa: bool = False


class IncomeBreakdown(BaseModel):
    effective_rental: float = 0.0
    total: float = 0.0


class DSCRResult(BaseModel):
    ratio: float
    gross_rental_income: float
    debt_service: float
    passes: bool


class CalculatedResults(BaseModel):
    base_loan_amount: float
    financed_mip: float
    total_loan_amount: float

    monthly_principal_and_interest: float
    monthly_tax: float
    monthly_insurance: float
    monthly_mi: float
    monthly_hoa: float
    monthly_dpa_payment: float
    monthly_dpa2_payment: float
    total_monthly_payment: float
    base_monthly_payment: float

    total_closing_costs: float
    buydown_cost: float
    net_closing_costs: float
    unused_credits: float
    prepaid_interest: float
    prepaid_interest_days: float

    down_payment_required: float
    earnest_money: float
    seller_concessions_amount: float
    seller_concessions_percent: float
    max_concessions_allowed: float
    lender_credits_amount: float
    total_credits: float
    is_concessions_excessive: bool
    total_dpa_amount: float
    total_funds_required: float
    cash_to_close: float

    ltv: float
    mi_rate_percent: float
    buydown_schedule: Optional[List[BuydownYear]] = None

    dti: DTIRatios
    conventional: AffordabilityResult
    fha: AffordabilityResult
    warnings: ScenarioWarnings
    income: IncomeBreakdown
    dscr: Optional[DSCRResult] = None
