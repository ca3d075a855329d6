"""Health check blueprint."""

from flask import Blueprint, Response, current_app, jsonify

from fincalc.models.tax_tables import supported_tax_years

health_bp = Blueprint("health", __name__)


@health_bp.route("/healthz")
def health_check() -> Response:
    """Health check endpoint.

    Returns:
        JSON response with status and the tax years that can be estimated
    """
    tax_years = supported_tax_years(current_app.config.get("TAX_TABLES_PATH"))
    return jsonify({"status": "ok", "tax_years": tax_years})
