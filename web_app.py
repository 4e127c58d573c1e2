from flask import Flask, request, render_template, send_file, jsonify
import io
import os
import logging
from palindrome_tip.batch import calculate_batch_df, read_file_to_df, write_results_excel
from palindrome_tip.core import calculate_all
from palindrome_tip.formatting import calculate_inputs, fmt_money, format_calculation, process_inputs
from palindrome_tip.validation import SUBTOTAL_FIELD

logger = logging.getLogger(__name__)

try:
    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
except Exception:
    sentry_sdk = None


app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-for-local-testing-only")

# Max upload size for batch files: default 16 MiB, can be overridden via env var MAX_CONTENT_LENGTH
app.config["MAX_CONTENT_LENGTH"] = int(os.environ.get("MAX_CONTENT_LENGTH", 16 * 1024 * 1024))

# Tip percent pre-filled in the form and used for batch files without a tip column
app.config["DEFAULT_TIP_PERCENT"] = os.environ.get("DEFAULT_TIP_PERCENT", "20")

# Optional Basic Auth: set BASIC_AUTH_USERNAME and BASIC_AUTH_PASSWORD in env to enable
BASIC_AUTH_USERNAME = os.environ.get("BASIC_AUTH_USERNAME")
BASIC_AUTH_PASSWORD = os.environ.get("BASIC_AUTH_PASSWORD")

# Initialize Sentry if DSN provided
SENTRY_DSN = os.environ.get("SENTRY_DSN")
if SENTRY_DSN and sentry_sdk is not None:
    sentry_sdk.init(dsn=SENTRY_DSN, integrations=[FlaskIntegration()])


def _check_basic_auth():
    """Return True if auth is not enabled or if provided credentials match env vars."""
    if not (BASIC_AUTH_USERNAME and BASIC_AUTH_PASSWORD):
        return True
    auth = request.authorization
    if not auth:
        return False
    return auth.username == BASIC_AUTH_USERNAME and auth.password == BASIC_AUTH_PASSWORD


@app.before_request
def require_basic_auth():
    # Protect all routes when BASIC_AUTH_* are set
    if not _check_basic_auth():
        return "Unauthorized", 401, {"WWW-Authenticate": 'Basic realm="Login Required"'}


ALLOWED_EXTENSIONS = {"xlsx", "xls", "csv"}


def _allowed_file(filename: str) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS


def _render_form(status=200, **context):
    context.setdefault("subtotal", "")
    context.setdefault("total", "")
    context.setdefault("tip", app.config["DEFAULT_TIP_PERCENT"])
    return render_template("index.html", **context), status


@app.errorhandler(413)
def request_entity_too_large(error):
    return _render_form(413, error="File too large. Max size is {} bytes.".format(app.config["MAX_CONTENT_LENGTH"]))


@app.route("/health", methods=["GET"])
def health():
    return jsonify(status="ok"), 200


@app.route("/ready", methods=["GET"])
def ready():
    # Basic readiness check: can calculate and write an in-memory excel
    try:
        import pandas as pd

        calculate_all("35.23", "41.12", "20")
        with io.BytesIO() as bio:
            write_results_excel(pd.DataFrame({"a": [1]}), bio)
        return jsonify(ready=True), 200
    except Exception:
        logger.exception("Readiness check failed")
        return jsonify(ready=False), 500


@app.route("/", methods=["GET", "POST"])
def index():
    if request.method == "GET":
        return _render_form(focus=SUBTOTAL_FIELD)

    subtotal = request.form.get("subtotal", "")
    total = request.form.get("total", "")
    tip = request.form.get("tip", "")

    validation, text = process_inputs(subtotal, total, tip)
    if not validation.ok:
        return _render_form(
            error=validation.message,
            focus=validation.focus_target,
            subtotal=subtotal,
            total=total,
            tip=tip,
        )

    return _render_form(result=text, subtotal=subtotal, total=total, tip=tip)


@app.route("/api/calculate", methods=["POST"])
def api_calculate():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    # JSON numbers arrive as int/float; the validator works on raw text
    subtotal, total, tip = (
        None if payload.get(key) is None else str(payload.get(key)) for key in ("subtotal", "total", "tip")
    )

    validation, result = calculate_inputs(subtotal, total, tip)
    if result is None:
        return jsonify(ok=False, message=validation.message, focus_target=validation.focus_target), 400

    text = format_calculation(result)
    return jsonify(
        ok=True,
        result=text,
        calculation={
            "subtotal": fmt_money(result.subtotal),
            "simplified_subtotal": fmt_money(result.simplified_subtotal),
            "tip_percent": str(result.tip_percent),
            "base_tip": fmt_money(result.base_tip),
            "tentative_total": fmt_money(result.tentative_total),
            "palindrome_total": fmt_money(result.palindrome_total),
            "palindrome_tip": fmt_money(result.palindrome_tip),
            "original_total": fmt_money(result.original_total),
        },
    ), 200


@app.route("/batch", methods=["POST"])
def batch():
    uploaded = request.files.get("file")
    if uploaded is None or uploaded.filename == "":
        return _render_form(400, batch_error="Please upload a file.")
    if not _allowed_file(uploaded.filename):
        return _render_form(400, batch_error="Unsupported file type. Please upload .xlsx, .xls, or .csv files.")

    subtotal_col = request.form.get("subtotal_col", "").strip() or None
    total_col = request.form.get("total_col", "").strip() or None
    tip_col = request.form.get("tip_col", "").strip() or None

    try:
        df = read_file_to_df(uploaded.read(), uploaded.filename)
        logger.info(f"Batch file {uploaded.filename} loaded successfully")
        results_df = calculate_batch_df(
            df,
            subtotal_col,
            total_col,
            tip_col,
            default_tip_percent=app.config["DEFAULT_TIP_PERCENT"],
        )
    except (KeyError, ValueError) as e:
        logger.error(f"Could not process batch file {uploaded.filename}: {e}")
        if sentry_sdk is not None:
            sentry_sdk.capture_exception(e)
        return _render_form(400, batch_error=f"Error processing file: {e}")

    output_io = io.BytesIO()
    write_results_excel(results_df, output_io)
    output_io.seek(0)

    return send_file(
        output_io,
        as_attachment=True,
        download_name="Palindrome_Tips_OUTPUT.xlsx",
        mimetype=("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
    )


if __name__ == "__main__":
    # Use PORT environment variable for cloud servers; default to 5000 for local dev
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_ENV") == "development"
    app.run(host="0.0.0.0", port=port, debug=debug)
