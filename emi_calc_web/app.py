import logging
import os
from dataclasses import asdict

from flask import Flask, jsonify, request

from emi_calc.engine import run_calculation
from emi_calc.formatter import SUPPORTED_CURRENCIES, get_currency
from emi_calc.main import result_to_dict, scenarios_to_records, schedule_to_records
from emi_calc.utils import parse_rate_list, terms_from_inputs

logger = logging.getLogger(__name__)

INVALID_TERMS_MESSAGE = (
    "Loan amount, interest rate and tenure must be positive and produce a finite installment."
)


def _empty_response(error: str, currency_code: str, status: int):
    body = {
        "result": None,
        "schedule": [],
        "comparison": [],
        "currency": asdict(get_currency(currency_code)),
        "error": error,
    }
    return jsonify(body), status


def _form_payload() -> dict:
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


def _comparison_rates(value) -> list:
    """Accept either the raw comma separated field or a JSON list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        value = ",".join(str(v) for v in value)
    return parse_rate_list(str(value))


def _truthy(value) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


def _schedule_for_view(schedule: list, preview_rows: int, show_full_schedule: bool):
    if show_full_schedule or len(schedule) <= preview_rows:
        return schedule, 0
    return schedule[:preview_rows], len(schedule) - preview_rows


def create_app(config=None) -> Flask:
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    app.config["SCHEDULE_PREVIEW_ROWS"] = int(os.environ.get("EMI_CALC_SCHEDULE_PREVIEW_ROWS", "120"))
    app.json.ensure_ascii = False
    if config:
        app.config.update(config)

    @app.get("/healthz")
    def healthz():
        return jsonify({"status": "ok"})

    @app.get("/api/currencies")
    def currencies():
        return jsonify([asdict(c) for c in SUPPORTED_CURRENCIES.values()])

    @app.post("/api/calculate")
    def calculate():
        form = _form_payload()
        currency = get_currency(form.get("currency"))
        try:
            terms = terms_from_inputs(
                form.get("loanAmount", ""),
                form.get("interestRate", ""),
                form.get("tenure", ""),
                form.get("tenureUnit"),
            )
        except ValueError as exc:
            logger.warning("Rejected calculation request: %s", exc)
            return _empty_response(str(exc), currency.code, 400)

        calculation = run_calculation(terms, _comparison_rates(form.get("comparisonRates")))
        if calculation is None:
            logger.info("No EMI for %s", terms)
            return _empty_response(INVALID_TERMS_MESSAGE, currency.code, 200)

        schedule, truncated = _schedule_for_view(
            schedule_to_records(calculation.schedule),
            app.config["SCHEDULE_PREVIEW_ROWS"],
            _truthy(form.get("full", "")),
        )
        return jsonify(
            {
                "terms": asdict(terms),
                "result": {
                    **result_to_dict(calculation.result),
                    "interest_share": calculation.result.interest_share,
                },
                "schedule": schedule,
                "truncated": truncated,
                "comparison": scenarios_to_records(calculation.scenarios),
                "currency": asdict(currency),
                "error": None,
            }
        )

    return app


app = create_app()


if __name__ == "__main__":
    print("Starting EMI calculator API...")
    app.run(host="0.0.0.0", port=8710, debug=True)
