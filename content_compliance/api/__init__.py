"""
HTTP surface for the compliance engine.

`create_app` builds the FastAPI application; `schema` holds the request
models and result serialisers shared with other callers.
"""

from .app import EngineRegistry, create_app
from .schema import ValidationRequestModel, get_validation_result_schema, serialize_rule_set

__all__ = [
    "EngineRegistry",
    "create_app",
    "ValidationRequestModel",
    "get_validation_result_schema",
    "serialize_rule_set",
]
