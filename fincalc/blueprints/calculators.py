"""
Calculators blueprint.

JSON endpoints for each calculator. Request bodies carry raw form values
(usually strings); they are parsed and clamped before the calculation runs,
so a half-filled form yields an empty or zeroed result rather than an error.
"""

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, ValidationError

from fincalc.models.currency import CURRENCIES, FALLBACK_BASE, CurrencyConverter
from fincalc.models.debt_to_income import DebtToIncomeCalculator, DebtToIncomeInputs
from fincalc.models.income_tax import IncomeTaxCalculator, TaxProfile
from fincalc.models.inputs import (
    parse_bool,
    parse_int,
    parse_number,
    parse_optional_number,
    parse_percent,
)
from fincalc.models.interest_rate import InterestRateCalculator, LoanTerms
from fincalc.models.margin import MarginFacts, MarginResolver
from fincalc.models.roth_ira import RothIraCalculator, RothIraInputs
from fincalc.models.social_security import ClaimingAgeOptimizer, ClaimOption
from fincalc.models.tax_tables import FILING_STATUSES, load_tax_tables
from fincalc.services.exchange_rates import ExchangeRateClient

calculators_bp = Blueprint("calculators", __name__, url_prefix="/api")

TAX_PROFILE_MONEY_FIELDS = (
    "wages",
    "interest_income",
    "ordinary_dividends",
    "qualified_dividends",
    "passive_income",
    "short_term_capital_gain",
    "long_term_capital_gain",
    "other_income",
    "ira_contributions",
    "student_loan_interest",
    "real_estate_tax",
    "mortgage_interest",
    "charitable_donations",
    "child_care_expense",
    "other_deductibles",
    "federal_withheld",
    "state_withheld",
    "local_withheld",
)

MAX_EDUCATION_EXPENSES = 4


def _form() -> Dict[str, Any]:
    """Request body as a dict; malformed or missing JSON is an empty form."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _respond(result: Any) -> Any:
    if isinstance(result, BaseModel):
        return jsonify(result.model_dump(mode="json"))
    return jsonify(result)


@calculators_bp.errorhandler(ValidationError)
def handle_validation_error(error: ValidationError) -> Any:
    current_app.logger.warning(f"Rejected calculator input: {error}")
    details = [
        {"loc": list(err["loc"]), "msg": err["msg"]} for err in error.errors()
    ]
    return jsonify({"error": "Invalid input", "details": details}), 400


@calculators_bp.route("/interest-rate", methods=["POST"])
def interest_rate() -> Any:
    """Solve the implied rate of a loan and return its amortization schedule."""
    form = _form()
    terms = LoanTerms(
        principal=parse_number(form.get("loan_amount")),
        payment_amount=parse_number(form.get("monthly_payment")),
        term_years=parse_int(form.get("loan_term_years"), maximum=100),
        term_months=parse_int(form.get("loan_term_months"), maximum=1200),
    )
    return _respond(InterestRateCalculator.analyze(terms))


@calculators_bp.route("/income-tax", methods=["POST"])
def income_tax() -> Any:
    """Estimate federal income tax, refund or balance due."""
    form = _form()

    filing_status = form.get("filing_status") or "single"
    if filing_status not in FILING_STATUSES:
        return jsonify({"error": f"Unsupported filing status: {filing_status}"}), 422

    tax_year = parse_int(form.get("tax_year"), default=2024, minimum=1900, maximum=2100)
    tables = load_tax_tables(current_app.config.get("TAX_TABLES_PATH"))
    if tax_year not in tables:
        return (
            jsonify(
                {
                    "error": f"Unsupported tax year: {tax_year}",
                    "supported_years": sorted(tables),
                }
            ),
            422,
        )

    raw_education = form.get("education_expenses") or []
    if not isinstance(raw_education, list):
        raw_education = [raw_education]

    profile = TaxProfile(
        filing_status=filing_status,
        tax_year=tax_year,
        education_expenses=[
            parse_number(value) for value in raw_education[:MAX_EDUCATION_EXPENSES]
        ],
        young_dependents=parse_int(form.get("young_dependents"), maximum=20),
        other_dependents=parse_int(form.get("other_dependents"), maximum=20),
        **{name: parse_number(form.get(name)) for name in TAX_PROFILE_MONEY_FIELDS},
    )
    return _respond(IncomeTaxCalculator.calculate(profile, tables))


@calculators_bp.route("/margin/profit", methods=["POST"])
def profit_margin() -> Any:
    """Resolve cost, revenue, margin and profit from any two of them."""
    form = _form()
    facts = MarginFacts(
        cost=parse_optional_number(form.get("cost"), minimum=0),
        revenue=parse_optional_number(form.get("revenue"), minimum=0),
        margin=parse_optional_number(form.get("margin"), minimum=0, maximum=100),
        profit=parse_optional_number(form.get("profit")),
    )
    return _respond(MarginResolver.resolve(facts))


@calculators_bp.route("/margin/stock", methods=["POST"])
def stock_margin() -> Any:
    """Funds needed to buy stock on margin."""
    form = _form()
    return _respond(
        MarginResolver.stock_margin(
            parse_number(form.get("stock_price")),
            parse_number(form.get("number_of_shares")),
            parse_percent(form.get("margin_requirement")),
        )
    )


@calculators_bp.route("/margin/currency", methods=["POST"])
def currency_margin() -> Any:
    """Margin required for a leveraged forex position."""
    form = _form()
    return _respond(
        MarginResolver.currency_margin(
            parse_number(form.get("exchange_rate")),
            parse_number(form.get("margin_ratio")),
            parse_number(form.get("units")),
        )
    )


@calculators_bp.route("/roth-ira", methods=["POST"])
def roth_ira() -> Any:
    """Compare a Roth IRA with a taxable account."""
    form = _form()
    inputs = RothIraInputs(
        current_balance=parse_number(
            form.get("current_balance"), default=20000, maximum=10_000_000
        ),
        annual_contribution=parse_number(
            form.get("annual_contribution"), default=7000, maximum=100_000
        ),
        maximize_contributions=parse_bool(form.get("maximize_contributions")),
        expected_return=parse_percent(form.get("expected_return"), maximum=30, default=6),
        current_age=parse_int(form.get("current_age"), default=30, maximum=100),
        retirement_age=parse_int(form.get("retirement_age"), default=65, maximum=120),
        marginal_tax_rate=parse_percent(
            form.get("marginal_tax_rate"), maximum=50, default=25
        ),
    )
    return _respond(RothIraCalculator.compare(inputs))


@calculators_bp.route("/social-security/optimal-age", methods=["POST"])
def social_security_optimal_age() -> Any:
    """Find the claiming age with the highest present value."""
    form = _form()
    monthly_benefit = parse_optional_number(form.get("monthly_benefit_at_fra"), minimum=0)
    result = ClaimingAgeOptimizer.optimal_age(
        birth_year=parse_int(form.get("birth_year"), default=1970, minimum=1900, maximum=2100),
        life_expectancy=parse_int(form.get("life_expectancy"), default=83, maximum=120),
        discount_rate=parse_percent(form.get("investment_return")) / 100,
        cola_rate=parse_percent(form.get("cola_rate")) / 100,
        monthly_benefit_at_fra=monthly_benefit,
    )
    return _respond(result)


@calculators_bp.route("/social-security/compare", methods=["POST"])
def social_security_compare() -> Any:
    """Compare two claiming ages with known monthly payments."""
    form = _form()
    option_a = ClaimOption(
        claim_age=parse_int(form.get("claim_age_1"), default=62, maximum=120),
        monthly_payment=parse_number(form.get("monthly_payment_1")),
    )
    option_b = ClaimOption(
        claim_age=parse_int(form.get("claim_age_2"), default=70, maximum=120),
        monthly_payment=parse_number(form.get("monthly_payment_2")),
    )
    result = ClaimingAgeOptimizer.compare_two(
        option_a,
        option_b,
        life_expectancy=parse_int(form.get("life_expectancy"), default=85, maximum=120),
        discount_rate=parse_percent(form.get("investment_return")) / 100,
        cola_rate=parse_percent(form.get("cola_rate")) / 100,
    )
    return _respond(result)


@calculators_bp.route("/debt-to-income", methods=["POST"])
def debt_to_income() -> Any:
    """Front-end and back-end debt-to-income ratios."""
    form = _form()
    flows = {}
    for name, field in DebtToIncomeInputs.model_fields.items():
        item = form.get(name)
        if not isinstance(item, dict):
            continue
        frequency = item.get("frequency")
        if frequency not in ("month", "year"):
            frequency = field.get_default(call_default_factory=True).frequency
        flows[name] = {"amount": parse_number(item.get("amount")), "frequency": frequency}

    return _respond(DebtToIncomeCalculator.calculate(DebtToIncomeInputs(**flows)))


@calculators_bp.route("/currency/currencies", methods=["GET"])
def list_currencies() -> Any:
    """Supported currencies with display names and symbols."""
    return jsonify([currency.model_dump() for currency in CURRENCIES])


@calculators_bp.route("/currency/rates", methods=["GET"])
def currency_rates() -> Any:
    """Latest exchange rates, falling back to the static table."""
    base = (request.args.get("base") or FALLBACK_BASE).upper()
    table = ExchangeRateClient.from_settings().fetch_rates(base)
    return _respond(table)


@calculators_bp.route("/currency/convert", methods=["POST"])
def currency_convert() -> Any:
    """Convert an amount between two currencies."""
    form = _form()
    from_currency = str(form.get("from_currency") or FALLBACK_BASE).upper()
    to_currency = str(form.get("to_currency") or "EUR").upper()

    custom_rate = None
    if form.get("mode") == "custom":
        custom_rate = parse_optional_number(form.get("custom_rate"))
        if custom_rate is not None and custom_rate <= 0:
            custom_rate = None

    table = ExchangeRateClient.from_settings().fetch_rates(FALLBACK_BASE)
    result = CurrencyConverter.convert(
        parse_number(form.get("amount")),
        from_currency,
        to_currency,
        table,
        custom_rate,
    )
    if result is None:
        return (
            jsonify({"error": f"Unknown currency pair: {from_currency}/{to_currency}"}),
            422,
        )
    return _respond(result)
