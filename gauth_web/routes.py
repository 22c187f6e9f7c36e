"""
GAUTH API ROUTES - FLASK BLUEPRINT

Every endpoint is stateless: the secret travels in the request and is never saved.

EXAMPLES:
curl -X POST http://localhost:5000/api/secret -H "Content-Type: application/json" -d "{}"
curl -X POST http://localhost:5000/api/verify -H "Content-Type: application/json" \
     -d '{"secret": "JBSWY3DPEHPK3PXP", "code": "123456"}'
"""
import base64
import io

import qrcode
from flask import Blueprint, current_app, jsonify, request

from gauth import otp, qr, secret
from gauth.errors import AuthenticatorError

api_bp = Blueprint('gauth_api', __name__, url_prefix='/api')


class InvalidRequest(Exception):
    """Missing or malformed request field."""


@api_bp.errorhandler(InvalidRequest)
def handle_bad_request(e):
    return jsonify({"error": str(e)}), 400


@api_bp.errorhandler(AuthenticatorError)
def handle_authenticator_error(e):
    current_app.logger.info("Rejected request: %s", e)
    return jsonify({"error": str(e)}), 400


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidRequest("JSON object required")
    return data


def _require(data: dict, *fields):
    missing = [f for f in fields if f not in data]
    if missing:
        raise InvalidRequest(f"Missing field(s): {', '.join(missing)}")


def _optional_int(data: dict, field: str, default=None):
    value = data.get(field)
    if value is None:
        return default
    # JSON true/1.5 are not integers; query-string values arrive as text
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise InvalidRequest(f"'{field}' must be an integer")


def _short(secret_b32) -> str:
    return f"{str(secret_b32)[:4]}..."


@api_bp.route('/secret', methods=['POST'])
def create_secret():
    """
    CREATE A SECRET

      curl -X POST http://localhost:5000/api/secret -H "Content-Type: application/json" -d '{"length": 32}'

    length is counted in Base32 characters (16-128).
    """
    data = _json_body()
    length = _optional_int(data, 'length', secret.DEFAULT_SECRET_LENGTH)
    new_secret = secret.create_secret(length)
    current_app.logger.info("Generated secret %s", _short(new_secret))
    return jsonify({"secret": new_secret}), 201


@api_bp.route('/code', methods=['POST'])
def get_code():
    """
    CURRENT (OR GIVEN) CODE FOR A SECRET

    Input:  {"secret": "...", "time_step": 123}
    Code length comes from the CODE_LENGTH setting.
    Output: {"code": "123456", "time_step": 123}
    """
    data = _json_body()
    _require(data, 'secret')
    time_step = _optional_int(data, 'time_step')
    if time_step is None:
        time_step = otp.current_time_step()
    code = otp.get_code(str(data['secret']), time_step, current_app.config["CODE_LENGTH"])
    return jsonify({"code": code, "time_step": time_step})


@api_bp.route('/verify', methods=['POST'])
def verify_code():
    """
    VERIFY A CODE

    Input:
      {
        "secret": "...",       # required
        "code": "123456",      # required, as a string (leading zeros matter)
        "discrepancy": 1,      # +/- 30s steps, at most MAX_DISCREPANCY
        "time_step": 123       # default: now
      }

    Output:
      {"valid": true}  or  {"valid": false}
    """
    data = _json_body()
    _require(data, 'secret', 'code')
    discrepancy = _optional_int(data, 'discrepancy', current_app.config["DISCREPANCY"])
    if discrepancy > current_app.config["MAX_DISCREPANCY"]:
        raise InvalidRequest(f"'discrepancy' must be <= {current_app.config['MAX_DISCREPANCY']}")
    time_step = _optional_int(data, 'time_step')

    valid = otp.verify_code(
        str(data['secret']),
        str(data['code']),
        discrepancy=discrepancy,
        time_step=time_step,
        code_length=current_app.config["CODE_LENGTH"],
    )
    current_app.logger.info("Verification for %s: %s", _short(data['secret']), valid)
    return jsonify({"valid": valid})


@api_bp.route('/qr_url', methods=['GET'])
def get_qr_url():
    """
    QR-CODE IMAGE URL FOR AUTHENTICATOR APPS

      curl "http://localhost:5000/api/qr_url?name=alice@example.com&secret=JBSWY3DPEHPK3PXP&title=MyApp"

    Optional: width, height (default 200), level (L/M/Q/H, default M)
    """
    args = request.args
    _require(args, 'name', 'secret')
    title = args.get('title', current_app.config["ISSUER"])
    url = qr.qr_code_url(
        args['name'],
        args['secret'],
        title,
        width=_optional_int(args, 'width', qr.DEFAULT_QR_SIZE),
        height=_optional_int(args, 'height', qr.DEFAULT_QR_SIZE),
        level=args.get('level', qr.DEFAULT_QR_LEVEL),
    )
    return jsonify({"url": url, "otpauth_uri": qr.otpauth_uri(args['name'], args['secret'], title)})


@api_bp.route('/qr_code', methods=['POST'])
def get_qr_code():
    """
    QR-CODE IMAGE RENDERED LOCALLY (PNG data URI)

    Body: {"name": "alice@example.com", "secret": "JBSWY3DPEHPK3PXP", "title": "MyApp"}
    """
    data = _json_body()
    _require(data, 'name', 'secret')
    title = data.get('title', current_app.config["ISSUER"])
    uri = qr.otpauth_uri(str(data['name']), str(data['secret']),
                         None if title is None else str(title))

    image = qrcode.QRCode(version=1, box_size=10, border=5)
    image.add_data(uri)
    image.make(fit=True)
    img = image.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format='PNG')
    img_str = base64.b64encode(buffer.getvalue()).decode()

    return jsonify({
        "qr_code": f"data:image/png;base64,{img_str}",
        "otpauth_uri": uri,
    })
