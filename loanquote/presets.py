"""Guideline tables and default scenario values.

All percentage figures are expressed in percent (``0.55`` means 0.55%).  The
mortgage insurance factors and concession ceilings are point-in-time
approximations of agency guidelines, not insurer rate cards.
"""

DISCLAIMER = (
    "Figures are estimates for discussion purposes only and are not a loan "
    "commitment. Mortgage insurance, concession limits and qualifying ratios "
    "follow simplified agency guidelines; AUS findings, lender overlays and "
    "underwriter discretion prevail."
)

DEFAULT_TERM_MONTHS = 360
DEFAULT_DPA_TERM_MONTHS = 120

# Upfront premium financed into the loan when the scenario leaves it blank.
UFMIP_DEFAULTS = {"FHA": 1.75, "VA": 2.15}

# FHA annual MIP by LTV; the 95% boundary belongs to the lower tier.
FHA_MIP_TABLE = {">95": 0.55, "<=95": 0.50}

# Conventional PMI applies above 80% LTV.  Bands are open at the bottom:
# ``(95, 0.95)`` means LTV > 95 uses 0.95%.
CONV_MI_BANDS = [(95.0, 0.95), (90.0, 0.75), (85.0, 0.48), (80.0, 0.28)]

# Lender's title insurance.  Loan amounts up to and including the first
# bound use the first rate; below the second bound the second rate; from the
# second bound up a flat fee.
TITLE_TIERS = {
    "low_max": 250000.0,
    "low_pct": 0.37,
    "mid_max": 550000.0,
    "mid_pct": 0.30,
    "flat_fee": 1650.0,
}

# Seller concession ceilings as % of purchase price.  Jumbo has no computed
# ceiling (0).
CONCESSION_LIMITS = {
    "FHA": 6.0,
    "VA": 4.0,
    "Jumbo": 0.0,
    "Conventional": [(90.0, 3.0), (75.0, 6.0), (0.0, 9.0)],
}

# Qualifying ratio ceilings used by the reverse affordability solver.
DTI_RULES = {
    "Conventional": {"FE": 46.99, "BE": 49.99},
    "FHA": {"FE": 46.99, "BE": 57.00},
}

RENTAL_INCOME_FACTOR = 0.75
MIN_DSCR = 1.0

# Rate drop per subsidized year for each buydown shape.  The schedule adds
# one terminal full-rate year after the relief window.
BUYDOWN_DROPS = {
    "2-1": [2.0, 1.0],
    "1-0": [1.0],
    "1-1": [1.0, 1.0],
    "3-2-1": [3.0, 2.0, 1.0],
}

# Validation thresholds used by ``core.rules``.
LOAN_LIMITS = {
    "conventional_conforming": 766550.0,
    "fha_ceiling": 1149825.0,
}

LTV_RULES = {
    "Conventional": {"min_down_pct": 3.0, "max_ltv": 97.0},
    "FHA": {"min_down_pct": 3.5, "max_ltv": 96.5},
    "VA": {"min_down_pct": 0.0, "max_ltv": 100.0},
    "Jumbo": {"min_down_pct": 10.0, "max_ltv": 90.0},
}

VALIDATION_THRESHOLDS = {
    "purchase_price_min": 50000.0,
    "interest_rate_min": 2.0,
    "interest_rate_max": 12.0,
    "dti_front_end_warning": 43.0,
    "dti_back_end_max": 50.0,
    "credit_score_fha_min": 580,
    "credit_score_conventional_min": 620,
}

DEFAULT_CLOSING_COSTS = [
    {"id": "discount-points", "category": "Lender Fees", "name": "Discount Points", "amount": 0.0, "is_fixed": False},
    {"id": "underwriting", "category": "Lender Fees", "name": "Underwriting Fee", "amount": 995.0, "is_fixed": True},
    {"id": "processing", "category": "Lender Fees", "name": "Administration Fee", "amount": 795.0, "is_fixed": True},
    {"id": "tax-service", "category": "Lender Fees", "name": "Tax Service Fee", "amount": 71.0, "is_fixed": True},
    {"id": "wire-transfer", "category": "Lender Fees", "name": "Wire Transfer Fee", "amount": 23.0, "is_fixed": True},
    {"id": "appraisal", "category": "Third Party Fees", "name": "Appraisal", "amount": 650.0, "is_fixed": True},
    {"id": "credit-report", "category": "Third Party Fees", "name": "Credit Report", "amount": 250.0, "is_fixed": True},
    {"id": "flood-cert", "category": "Third Party Fees", "name": "Flood Certification", "amount": 9.0, "is_fixed": True},
    {"id": "closing-protection-letter", "category": "Title & Government", "name": "Closing Protection Letter Fee", "amount": 25.0, "is_fixed": True},
    {"id": "endorsement-fee", "category": "Title & Government", "name": "Endorsement Fee", "amount": 55.0, "is_fixed": True},
    {"id": "e-recording-fee", "category": "Title & Government", "name": "E-recording Fee", "amount": 10.0, "is_fixed": True},
    {"id": "recording-fee", "category": "Title & Government", "name": "Recording Fee", "amount": 80.0, "is_fixed": True},
    {"id": "settlement-fee", "category": "Title & Government", "name": "Settlement Fee", "amount": 395.0, "is_fixed": True},
    {"id": "title-insurance", "category": "Title & Government", "name": "Lenders Title Insurance", "amount": 0.0, "is_fixed": True},
    {"id": "prepaid-interest", "category": "Escrows/Prepaids", "name": "Prepaid Interest", "amount": 0.0, "is_fixed": True, "days": 15},
    {"id": "prepaid-insurance", "category": "Escrows/Prepaids", "name": "Homeowners Insurance Premium", "amount": 0.0, "is_fixed": True, "months": 12},
    {"id": "tax-reserves", "category": "Escrows/Prepaids", "name": "Property Tax Reserves", "amount": 0.0, "is_fixed": True, "months": 3},
    {"id": "insurance-reserves", "category": "Escrows/Prepaids", "name": "Homeowners Insurance Reserves", "amount": 0.0, "is_fixed": True, "months": 2},
    {"id": "buyers-agent-commission", "category": "Other Fees", "name": "Buyer's Agent Commission", "amount": 0.0, "is_fixed": False},
    {"id": "realtor-admin", "category": "Other Fees", "name": "Realtor Admin Fee", "amount": 495.0, "is_fixed": True},
    {"id": "hoa-transfer", "category": "Other Fees", "name": "HOA Transfer Fee", "amount": 0.0, "is_fixed": True},
    {"id": "hoa-prepay", "category": "Other Fees", "name": "HOA Monthly Dues (Prepay)", "amount": 0.0, "is_fixed": True, "months": 1},
    {"id": "misc-1", "category": "Other Fees", "name": "Other Fee 1", "amount": 0.0, "is_fixed": True},
    {"id": "misc-2", "category": "Other Fees", "name": "Other Fee 2", "amount": 0.0, "is_fixed": True},
]

DEFAULT_SCENARIO = {
    "name": "New Scenario",
    "purchase_price": 500000.0,
    "earnest_money": 0.0,
    "down_payment_amount": 25000.0,
    "down_payment_percent": 5.0,
    "loan_type": "Conventional",
    "occupancy_type": "Primary Residence",
    "number_of_units": 1,
    "interest_rate": 6.5,
    "loan_term_months": DEFAULT_TERM_MONTHS,
    "credit_score": 740,
    "property_tax_yearly": 3000.0,
    "home_insurance_yearly": 1000.0,
    "hoa_monthly": 0.0,
    "closing_costs": DEFAULT_CLOSING_COSTS,
    "dpa": {"active": False, "amount": 10000.0, "rate": 7.5, "term_months": DEFAULT_DPA_TERM_MONTHS},
}
