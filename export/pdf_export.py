"""Scenario summary PDF.

Formatting only: every figure comes from ``CalculatedResults`` or the
precomputed closing cost breakdown.
"""
from __future__ import annotations
from typing import Optional, Sequence
from xml.sax.saxutils import escape

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.rules import RuleResult, has_blocking
from loanquote.models import CalculatedResults, Scenario
from loanquote.presets import DISCLAIMER

GRID = TableStyle(
    [
        ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
        ("BOX", (0, 0), (-1, -1), 1, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]
)


def _money(v: float) -> str:
    return f"${v:,.2f}"


def _kv_table(title: str, rows: list) -> Table:
    t = Table([[title, ""]] + rows, hAlign="LEFT", colWidths=[220, 300])
    t.setStyle(GRID)
    return t


def _grid_table(rows: list) -> Table:
    t = Table(rows, hAlign="LEFT")
    t.setStyle(GRID)
    return t


def build_scenario_pdf(
    out_path,
    branding: dict,
    scenario: Scenario,
    results: CalculatedResults,
    cost_table: Optional[pd.DataFrame] = None,
    warnings: Sequence[RuleResult] = (),
    override_reason: Optional[str] = None,
):
    """Write a scenario summary to ``out_path`` and return it.

    ``out_path`` may be a filename or a writable binary file object.

    Critical rule results require an ``override_reason``, which is printed on
    the document for audit purposes.
    """

    if has_blocking(list(warnings)) and not override_reason:
        raise ValueError("override_reason required when critical warnings exist")

    styles = getSampleStyleSheet()
    doc = SimpleDocTemplate(out_path, pagesize=LETTER, leftMargin=36, rightMargin=36, topMargin=36, bottomMargin=36)
    story = []
    title = escape(branding.get("title", "Loan Scenario Summary"))
    story += [Paragraph(f"<b>{title}</b>", styles["Title"]), Spacer(1, 6)]
    if branding.get("mlo"):
        story.append(Paragraph(f"MLO: {escape(str(branding['mlo']))}  |  NMLS: {escape(str(branding.get('nmls', '')))}", styles["Normal"]))
    if branding.get("contact"):
        story.append(Paragraph(f"Contact: {escape(str(branding['contact']))}", styles["Normal"]))
    story += [Spacer(1, 12)]

    snapshot = [
        ["Scenario", scenario.name],
        ["Client", scenario.client_name or "-"],
        ["Loan Type", f"{scenario.loan_type.value} / {scenario.occupancy_type.value}"],
        ["Purchase Price", _money(scenario.purchase_price)],
        ["Down Payment", f"{_money(results.down_payment_required)} ({scenario.down_payment_percent:.2f}%)"],
        ["Base Loan", _money(results.base_loan_amount)],
        ["Financed UFMIP / Funding Fee", _money(results.financed_mip)],
        ["Total Loan", _money(results.total_loan_amount)],
        ["Rate / Term", f"{scenario.interest_rate:.3f}% / {scenario.loan_term_months} mo"],
        ["LTV", f"{results.ltv:.2f}%"],
    ]
    story += [_kv_table("Deal Snapshot", snapshot), Spacer(1, 12)]

    monthly = [
        ["Principal & Interest", _money(results.monthly_principal_and_interest)],
        ["Property Tax", _money(results.monthly_tax)],
        ["Homeowners Insurance", _money(results.monthly_insurance)],
        [f"Mortgage Insurance ({results.mi_rate_percent:.2f}%)", _money(results.monthly_mi)],
        ["HOA", _money(results.monthly_hoa)],
    ]
    if results.monthly_dpa_payment:
        monthly.append(["Assistance Payment", _money(results.monthly_dpa_payment)])
    if results.monthly_dpa2_payment:
        monthly.append(["Second Assistance Payment", _money(results.monthly_dpa2_payment)])
    monthly.append(["Total Monthly Payment", _money(results.total_monthly_payment)])
    if results.total_monthly_payment != results.base_monthly_payment:
        monthly.append(["Note Rate Payment", _money(results.base_monthly_payment)])
    story += [_kv_table("Monthly Payment", monthly), Spacer(1, 12)]

    if cost_table is not None and not cost_table.empty:
        rows = [["Item", "Category", "Cost"]] + [
            [r["name"], r["category"], _money(r["cost"])] for _, r in cost_table.iterrows() if r["cost"]
        ]
        story += [Paragraph("<b>Closing Costs</b>", styles["Heading3"]), Spacer(1, 6), _grid_table(rows), Spacer(1, 12)]

    cash = [
        ["Total Closing Costs", _money(results.total_closing_costs)],
        ["Lender Credits", _money(results.lender_credits_amount)],
        ["Seller Concessions", _money(results.seller_concessions_amount)],
        ["Net Closing Costs", _money(results.net_closing_costs)],
        ["Unused Credits", _money(results.unused_credits)],
        ["Assistance", _money(results.total_dpa_amount)],
        ["Earnest Money", _money(results.earnest_money)],
        ["Cash to Close", _money(results.cash_to_close)],
    ]
    story += [_kv_table("Cash to Close", cash), Spacer(1, 12)]

    if results.buydown_schedule:
        rows = [["Year", "Rate", "P&I", "Subsidy", "Full Payment"]] + [
            [str(y.year), f"{y.rate:.3f}%", _money(y.payment), _money(y.subsidy), _money(y.full_payment)]
            for y in results.buydown_schedule
        ]
        story += [Paragraph("<b>Buydown Schedule</b>", styles["Heading3"]), Spacer(1, 6), _grid_table(rows), Spacer(1, 12)]

    if results.dscr is not None:
        story += [
            _kv_table(
                "DSCR",
                [
                    ["Gross Rental Income", _money(results.dscr.gross_rental_income)],
                    ["Debt Service", _money(results.dscr.debt_service)],
                    ["Ratio", f"{results.dscr.ratio:.2f} ({'Pass' if results.dscr.passes else 'Fail'})"],
                ],
            ),
            Spacer(1, 12),
        ]
    elif results.income.total > 0:
        qual = [
            ["Total Income", _money(results.income.total)],
            ["Front-End / Back-End DTI", f"{results.dti.front_end:.2f}% / {results.dti.back_end:.2f}%"],
        ]
        for aff in (results.conventional, results.fha):
            qual.append([f"{aff.program} Max Price", f"{_money(aff.max_price)} ({'Pass' if aff.passes else 'Fail'})"])
        story += [_kv_table("Qualification", qual), Spacer(1, 12)]

    if warnings:
        rows = [["Code", "Severity", "Message"]] + [[w.code, w.severity, w.message] for w in warnings]
        story += [Paragraph("<b>Warnings</b>", styles["Heading3"]), Spacer(1, 6), _grid_table(rows), Spacer(1, 12)]
    if override_reason:
        story.append(Paragraph(f"Override Reason: {escape(override_reason)}", styles["Normal"]))

    story += [Spacer(1, 12), Paragraph(f"<font size=8>{DISCLAIMER}</font>", styles["Normal"])]
    doc.build(story)
    return out_path
