#!/usr/bin/env python3
"""Remote document server for ClinicSync development and testing.

Stores and returns a single JSON document, which is all the sync engine
expects from its remote. There is no merging or authentication here: any
client can replace the document.

Endpoints:
    GET  /document    Return the stored document (404 if never written)
    PUT  /document    Replace the stored document (body: JSON object)
    GET  /health      Liveness probe

All endpoints return JSON responses and disable caching.
"""

from __future__ import annotations

import argparse
import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from clinicsync.core.validation import ValidationError, validate_document

logger = logging.getLogger(__name__)


class DocumentStore:
    """The stored document, optionally written through to a JSON file."""

    def __init__(self, data_file: Optional[Path] = None) -> None:
        self.data_file = data_file
        self._lock = threading.Lock()
        self._document: Optional[Dict[str, Any]] = None
        if data_file is not None and data_file.exists():
            try:
                with open(data_file, "r", encoding="utf-8") as f:
                    loaded = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load {data_file}: {e}. Starting empty.")
            else:
                if isinstance(loaded, dict):
                    self._document = loaded

    def get(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._document

    def replace(self, document: Dict[str, Any]) -> None:
        with self._lock:
            if self.data_file is not None:
                self.data_file.parent.mkdir(parents=True, exist_ok=True)
                tmp_file = self.data_file.with_suffix(".tmp")
                with open(tmp_file, "w", encoding="utf-8") as f:
                    json.dump(document, f)
                tmp_file.replace(self.data_file)
            self._document = document


def create_app(data_file: Optional[Path] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        data_file: JSON file persisting the document (default: memory only)

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    CORS(app)  # Clients are browsers on other origins

    documents = DocumentStore(data_file)
    app.extensions["clinicsync_documents"] = documents

    if data_file is not None:
        logger.info(f"Document server persisting to {data_file}")

    @app.after_request
    def disable_caching(response: Response) -> Response:
        response.headers["Cache-Control"] = "no-store"
        return response

    @app.errorhandler(404)
    def not_found(error: Any) -> tuple[Response, int]:
        """Handle 404 errors."""
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(ValidationError)
    def validation_error(error: ValidationError) -> tuple[Response, int]:
        """Handle validation errors."""
        logger.warning(f"Validation error: {error.field} - {error.message}")
        return jsonify({"error": f"Invalid {error.field}: {error.message}"}), 400

    @app.route("/health", methods=["GET"])
    def health() -> Response:
        return jsonify({"status": "ok"})

    @app.route("/document", methods=["GET"])
    def get_document() -> Any:
        """Return the document, or 404 if nothing was stored yet."""
        document = documents.get()
        if document is None:
            return jsonify({"error": "Document not initialized"}), 404
        return jsonify(document)

    @app.route("/document", methods=["PUT"])
    def put_document() -> tuple[Response, int]:
        """Replace the document wholesale."""
        payload = request.get_json(silent=True)
        if payload is None:
            raise ValidationError("body", "must be JSON")
        documents.replace(validate_document(payload))
        logger.info("Document replaced")
        return jsonify({"status": "stored"}), 200

    return app


def add_serve_subparser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add the serve subparser and its arguments."""
    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the remote document server",
    )
    serve_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port to listen on (default: 8080)",
    )
    serve_parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="JSON file to persist the document to (default: memory only)",
    )
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode",
    )


def run_server(args: argparse.Namespace) -> int:
    """Run the document server with parsed arguments."""
    app = create_app(data_file=args.data_file)
    logger.info(f"Serving remote document at http://{args.host}:{args.port}/document")
    app.run(host=args.host, port=args.port, debug=args.debug)
    return 0
