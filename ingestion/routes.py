from flask import Blueprint, current_app, request, jsonify
from werkzeug.exceptions import MethodNotAllowed, NotFound, RequestEntityTooLarge
from .utils.logging import logger
from .services.uploads import DatastoreError, read_upload, record_upload

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def error_response(msg, code=400, details=None):
    return jsonify({"error": msg, "details": details}), code


def get_database():
    return current_app.extensions["ingestion.db"]


def build_routes(identity):
    """Blueprint serving one backend identity: info, health and its upload endpoint."""
    routes_bp = Blueprint("routes_bp", __name__)
    api_path = identity.api_path

    @routes_bp.before_app_request
    def preflight():
        if request.method == "OPTIONS":
            return "", 200

    @routes_bp.after_app_request
    def add_cors_headers(response):
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response

    @routes_bp.route("/", methods=["GET"])
    def service_info():
        return jsonify({
            "backend": identity.name,
            "message": "Backend service is running",
            "endpoints": {
                "health": "/health",
                "api": f"{api_path} (POST for data submission)"
            }
        })

    @routes_bp.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok", "backend": identity.name, "port": current_app.config["PORT"]})

    @routes_bp.route(api_path, methods=["GET"])
    def api_info():
        return jsonify({
            "backend": identity.name,
            "message": "Use POST to submit data",
            "endpoint": api_path
        })

    @routes_bp.route(api_path, methods=["POST"])
    def upload_image():
        image = read_upload(request.files.get("image"))
        try:
            result = record_upload(get_database(), identity.name, image)
        except DatastoreError as e:
            logger.exception(f"Database error: {e.details}")
            return error_response("Database not responding", 500, e.details)
        return jsonify(result.to_dict())

    @routes_bp.app_errorhandler(NotFound)
    def not_found(e):
        return error_response("Not found", 404, request.path)

    @routes_bp.app_errorhandler(MethodNotAllowed)
    def method_not_allowed(e):
        return error_response("Method not allowed", 405, f"{request.method} {request.path}")

    @routes_bp.app_errorhandler(RequestEntityTooLarge)
    def too_large(e):
        limit = current_app.config.get("MAX_CONTENT_LENGTH")
        return error_response("Payload too large", 413, f"Upload exceeds {limit} bytes")

    return routes_bp
