"""
Flask app entry point for the gauth API.

- create_app() builds the app, enables CORS and registers the /api blueprint
- Settings come from DEFAULT_CONFIG, then GAUTH_* environment variables,
  then the `config` mapping passed by the caller (tests)

Run locally:
    flask --app gauth_web.app run
"""
from flask import Flask, jsonify
from flask_cors import CORS

from gauth import __version__
from gauth.otp import DEFAULT_CODE_LENGTH, DEFAULT_DISCREPANCY

DEFAULT_CONFIG = {
    "CODE_LENGTH": DEFAULT_CODE_LENGTH,
    "DISCREPANCY": DEFAULT_DISCREPANCY,
    "MAX_DISCREPANCY": 10,
    "ISSUER": "gauth",
}


def create_app(config=None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG)
    # GAUTH_CODE_LENGTH=8 -> app.config["CODE_LENGTH"] == 8
    app.config.from_prefixed_env("GAUTH")
    if config:
        app.config.from_mapping(config)

    # frontends on another origin call the API directly
    CORS(app)

    from gauth_web.routes import api_bp
    app.register_blueprint(api_bp)

    @app.route('/', methods=['GET'])
    def index():
        return jsonify({
            "service": "gauth",
            "version": __version__,
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules() if str(rule).startswith("/api/")
            ),
        })

    return app


app = create_app()


if __name__ == '__main__':
    app.run(debug=True, host='127.0.0.1', port=5000)
