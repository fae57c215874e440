"""HTTP service: the months read endpoint and the Gemini generation proxy."""
import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from math_calendar.config import Settings, load_settings
from math_calendar.content import ContentStore, load_bundled_content
from math_calendar.errors import (
    ConfigurationError, EmptyTextError, UpstreamError, ValidationError,
)
from math_calendar.gateway import truncate_prompt
from math_calendar.upstream import generate_text

logger = logging.getLogger(__name__)

SOURCE = "math-calendar-api"
MINIMAL_MESSAGE = "Full data available client-side"


def read_prompt(body) -> str:
    """Take the prompt from ``{"prompt": ...}`` or a bare JSON string."""
    prompt = body.get("prompt") if isinstance(body, dict) else body
    if not isinstance(prompt, str) or not prompt:
        raise ValidationError("prompt is required")
    return truncate_prompt(prompt)


def generate(prompt: str, settings: Settings) -> str:
    if not settings.gemini_api_key:
        raise ConfigurationError("GEMINI_API_KEY not set on server")
    return generate_text(prompt, settings.gemini_api_key, settings.gemini_model,
                         timeout=settings.gemini_timeout)


def create_app(settings: Settings | None = None, content: ContentStore | None = None) -> Flask:
    settings = settings or load_settings()
    content = content or load_bundled_content()

    app = Flask(__name__)
    CORS(app)
    app.config["SETTINGS"] = settings

    @app.route("/api/months", methods=["GET"])
    def months():
        payload = content.to_payload(include_data=not settings.minimal_api)
        if settings.minimal_api:
            payload["message"] = MINIMAL_MESSAGE
        else:
            payload["source"] = SOURCE
        return jsonify(payload)

    @app.route("/api/gemini", methods=["POST"])
    @app.route("/api/gemini/explain", methods=["POST"])
    def gemini():
        body = request.get_json(force=True, silent=True)
        try:
            prompt = read_prompt(body)
            text = generate(prompt, settings)
        except ValidationError as e:
            return jsonify({"error": str(e)}), 400
        except ConfigurationError as e:
            return jsonify({"error": str(e)}), 500
        except EmptyTextError:
            logger.warning("Gemini returned empty text")
            return jsonify({"error": "Gemini returned empty text"}), 500
        except UpstreamError:
            logger.exception("Gemini error")
            return jsonify({"error": "Failed to fetch from Gemini"}), 500
        return jsonify({"text": text})

    return app


def run(port: int | None = None, minimal: bool | None = None,
        settings: Settings | None = None) -> None:
    settings = settings or load_settings()
    if port is not None:
        settings.port = port
    if minimal is not None:
        settings.minimal_api = minimal
    app = create_app(settings)
    logger.info("Gemini %s", "enabled" if settings.gemini_enabled else "disabled")
    logger.info("Serving on port %s", settings.port)
    app.run(host="0.0.0.0", port=settings.port, debug=False)
