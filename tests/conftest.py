"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402
from flask import Flask  # noqa: E402
from flask.testing import FlaskClient  # noqa: E402

from wasbleibt.backend.app import create_app  # noqa: E402
from wasbleibt.backend.app.services.household import HouseholdRules  # noqa: E402
from wasbleibt.backend.config.year_config import (  # noqa: E402
    GenericHousingConfig,
    YearConfiguration,
    load_year_configuration,
)


@pytest.fixture()
def app() -> Flask:
    """Return a configured Flask application for integration tests."""

    application = create_app()
    application.config.update(TESTING=True)
    return application


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Provide a test client bound to the configured Flask app."""

    return app.test_client()


@pytest.fixture()
def configuration() -> YearConfiguration:
    """Return the published 2025 configuration."""

    return load_year_configuration(2025)


@pytest.fixture()
def rules(configuration: YearConfiguration) -> HouseholdRules:
    """Return household rules built from the published 2025 configuration."""

    return HouseholdRules.from_configuration(configuration)


@pytest.fixture()
def cliff_configuration(configuration: YearConfiguration) -> YearConfiguration:
    """Return a configuration whose Vienna housing benefit stops abruptly at 1000 net.

    Minimum income is zeroed so the cliff is the only source of a falling total.
    """

    benefits = configuration.benefits
    housing = GenericHousingConfig.model_validate(
        {
            "formula": "generic",
            "income_limits": {1: 1000},
            "max_rate_per_sqm": 10,
            "min_housing_cost_percent": 0,
            "taper_threshold": 1.0,
        }
    )
    minimum_income = benefits.minimum_income.model_copy(
        update={"single": 0.0, "couple": 0.0, "child_supplement": 0.0}
    )
    return configuration.model_copy(
        update={
            "benefits": benefits.model_copy(
                update={"housing": {"vienna": housing}, "minimum_income": minimum_income}
            )
        }
    )
