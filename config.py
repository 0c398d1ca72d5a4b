#!/usr/bin/env python
# config.py
import os
from typing import List

# This assumes config.py is at the root of the project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'change-me-song-library'

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'songlib', 'database', 'instance', 'songlib.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # External song detail service
    EXTERNAL_API_URL = (os.getenv('EXTERNAL_API_URL') or '').rstrip('/')
    # Upper bound for a single detail lookup; requests that exceed it fail the create
    EXTERNAL_API_TIMEOUT_SECONDS = _get_float('EXTERNAL_API_TIMEOUT_SECONDS', 10.0)

    # HTTP server
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = _get_int('PORT', 8080)
    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', 'http://localhost:3000')

    # Runtime behavior
    DEBUG = _get_bool('DEBUG', False)
    LOG_LEVEL = (os.getenv('LOG_LEVEL') or 'INFO').upper()
    # Control console logging; when disabled, logs go only to file and stdout JSON
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)

    # Observability
    OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
    OTEL_EXPORTER_OTLP_HEADERS = os.getenv('OTEL_EXPORTER_OTLP_HEADERS')
    OTEL_EXPORTER_OTLP_INSECURE = _get_bool('OTEL_EXPORTER_OTLP_INSECURE', True)
    OTEL_SERVICE_NAME = os.getenv('OTEL_SERVICE_NAME', 'song-library')
