"""Financial Calculators Flask Application Factory."""

from typing import Optional

from flask import Flask

from fincalc.config import get_global_settings


def create_app(config_name: Optional[str] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config_name: Configuration name (development, testing, production)

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = config_name or settings.app_env
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["TESTING"] = (config_name or settings.app_env) == "testing"
    app.config["TAX_TABLES_PATH"] = settings.tax_tables_path
    app.logger.setLevel(settings.log_level)

    # Register blueprints
    from fincalc.blueprints.calculators import calculators_bp
    from fincalc.blueprints.health import health_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(calculators_bp)

    return app
