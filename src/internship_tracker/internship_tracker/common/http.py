"""Flask glue shared by the feature controllers: JSON errors, body parsing, bearer auth."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Iterable, Optional, Type, TypeVar

from flask import Flask, g, jsonify, request
from pydantic import BaseModel
from pydantic import ValidationError as SchemaError
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from ..identity.model import Caller
from ..identity.service import IdentityService, require_role
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def error_response(message: str, status: int):
    return jsonify({"message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, e)
        elif e.status_code in (401, 403):
            logger.warning("%s %s rejected (%s): %s", request.method, request.path, e.status_code, e)
        return error_response(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return error_response("Internal server error", 500)


def _describe(e: SchemaError) -> str:
    first = e.errors()[0]
    where = ".".join(str(p) for p in first.get("loc", ())) or "body"
    return f"{where}: {first.get('msg', 'invalid value')}"


def parse_body(schema: Type[SchemaT]) -> SchemaT:
    """Validate the JSON body against ``schema``; failures become ValidationError."""
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    try:
        return schema.model_validate(payload)
    except SchemaError as e:
        raise ValidationError(_describe(e))


def query_date(name: str = "date"):
    value = (request.args.get(name) or "").strip()
    return parse_iso_date(value) if value else None


def current_caller() -> Caller:
    return g.caller


def token_required(identity: IdentityService, roles: Optional[Iterable[Role]] = None):
    """Decorator factory: resolve the bearer token, then apply the role gate."""
    allowed = set(roles) if roles else None

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            caller = identity.resolve(request.headers.get("Authorization"))
            if allowed is not None:
                require_role(caller, allowed)
            g.caller = caller
            return view(*args, **kwargs)

        return wrapper

    return decorator
