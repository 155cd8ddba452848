"""
TOTP DEMO API ROUTES - FLASK BLUEPRINT

Thin JSON layer over the shared Authenticator. The demo page polls
/api/totp and /api/breakdown once per second and posts the code typed by the
user to /api/verify.

EXAMPLES:
curl -X POST http://localhost:5000/api/enroll -H "Content-Type: application/json" -d '{"account": "alice@example.com"}'
curl http://localhost:5000/api/totp
curl -X POST http://localhost:5000/api/verify -H "Content-Type: application/json" -d '{"code": "123456"}'
"""

from flask import Blueprint, current_app, jsonify, request

from totp_engine import Authenticator, base32

otp_bp = Blueprint('otp', __name__, url_prefix='/api')


def _authenticator() -> Authenticator:
    return current_app.extensions["totp"]


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@otp_bp.route('/enroll', methods=['POST'])
def enroll():
    """
    CREATE THE ACCOUNT SECRET

    Body: {"account": "alice@example.com", "issuer": "MyApp"}   (issuer optional)
    Replaces any previous enrollment and clears the used-code history.
    """
    data = _json_body()
    account = data.get('account')
    if not isinstance(account, str) or not account.strip():
        return jsonify({"error": "account is required"}), 400
    issuer = data.get('issuer', current_app.config["ISSUER"])
    if not isinstance(issuer, str):
        return jsonify({"error": "issuer must be a string"}), 400

    auth = _authenticator()
    record = auth.enroll(account.strip(), issuer)
    return jsonify({
        "account": record.account,
        "issuer": record.issuer,
        "secret": base32.encode(record.secret),  # what the user types into an authenticator app
        "otpauth_uri": auth.provisioning_uri(),
    }), 201


@otp_bp.route('/otpauth_uri', methods=['GET'])
def otpauth_uri():
    return jsonify({"otpauth_uri": _authenticator().provisioning_uri()})


@otp_bp.route('/totp', methods=['GET'])
def current_totp():
    """Current code and the seconds it stays valid."""
    auth = _authenticator()
    snap = auth.snapshot()
    return jsonify({
        "code": snap.code,
        "step": snap.step,
        "remaining": snap.remaining,
        "period": auth.step_seconds,
        "digits": auth.digits,
    })


@otp_bp.route('/breakdown', methods=['GET'])
def breakdown():
    """Intermediate values of the current computation, for the algorithm walkthrough."""
    return jsonify(_authenticator().snapshot().breakdown._asdict())


@otp_bp.route('/verify', methods=['POST'])
def verify():
    """
    VERIFY A TOTP CODE

    Body: {"code": "123456"}
    Output: {"valid": true, "verdict": "accepted"}
            {"valid": false, "verdict": "invalid" | "replay"}
    """
    code = _json_body().get('code')
    if not isinstance(code, str) or not code:
        return jsonify({"error": "code is required"}), 400

    verdict = _authenticator().verify(code)
    return jsonify({"valid": verdict.accepted, "verdict": verdict.value})


@otp_bp.route('/used_codes', methods=['DELETE'])
def clear_used_codes():
    _authenticator().clear_used_codes()
    return jsonify({"cleared": True})
