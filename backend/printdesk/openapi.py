"""Minimal deterministic OpenAPI spec builder.

Scope (purposefully narrow): every public route with its auth requirement,
the Order / Error schemas, and the order lifecycle exported as
``x-transitions`` straight from the runtime state machine.
"""
from typing import Any, Dict, List

from .models.order import Order
from .services.lifecycle import transition_graph
from .services.orders import TRACKING_FIELDS

__all__ = ["build_openapi_spec"]

_STRING = {"type": "string"}
_NULLABLE_STRING = {"type": "string", "nullable": True}
_NULLABLE_TIME = {"type": "string", "format": "date-time", "nullable": True}


def _order_schema() -> Dict[str, Any]:
    props: Dict[str, Any] = {
        "id": {"type": "string", "format": "uuid"},
        "customer_name": _STRING,
        "contact": _STRING,
        "file_name": _STRING,
        "file_url": _NULLABLE_STRING,
        "file_path": _NULLABLE_STRING,
        "file_expires_at": _NULLABLE_TIME,
        "file_deleted": {"type": "boolean"},
        "payment_proof_url": _NULLABLE_STRING,
        "payment_proof_path": _NULLABLE_STRING,
        "payment_proof_expires_at": _NULLABLE_TIME,
        "payment_proof_deleted": {"type": "boolean"},
        "color_mode": {"type": "string", "enum": list(Order.COLOR_MODES)},
        "copies": {"type": "integer", "minimum": 1},
        "pages": {"type": "integer", "minimum": 1},
        "paper_size": {"type": "string", "enum": list(Order.PAPER_SIZES)},
        "status": {"type": "string", "enum": list(Order.ALL_STATUSES)},
        "estimated_time": {"type": "integer", "description": "minutes"},
        "notes": _NULLABLE_STRING,
        "created_at": {"type": "string", "format": "date-time"},
        "updated_at": {"type": "string", "format": "date-time"},
    }
    return {
        "type": "object",
        "properties": props,
        "required": ["id", "customer_name", "contact", "file_name", "color_mode", "copies", "status", "estimated_time", "created_at"],
        "x-transitions": transition_graph(),
    }


def _error_ref(desc: str) -> Dict[str, Any]:
    return {"description": desc, "content": {"application/json": {"schema": {"$ref": "#/components/schemas/Error"}}}}


def _json_ok(schema_ref: str, desc: str = "OK") -> Dict[str, Any]:
    return {"description": desc, "content": {"application/json": {"schema": {"$ref": schema_ref}}}}


def _secured(op: Dict[str, Any], *schemes: str) -> Dict[str, Any]:
    # Alternatives: any one listed scheme suffices
    op["security"] = [{scheme: []} for scheme in (schemes or ("bearerAuth",))]
    op.setdefault("responses", {})["401"] = _error_ref("Missing or invalid credential")
    return op


def _paths() -> Dict[str, Any]:
    query = lambda name, desc: {"name": name, "in": "query", "required": False, "schema": _STRING, "description": desc}  # noqa: E731
    list_op = _secured({
        "summary": "List orders newest first, or fetch one by id / trackingId",
        "parameters": [
            query("id", "full order (public)"),
            query("trackingId", "public tracking projection"),
            query("status", "filter by status"),
            query("sort", "e.g. -created_at,status"),
        ],
        "responses": {
            "200": {"description": "OK", "headers": {"ETag": {"schema": _STRING}, "Last-Modified": {"schema": _STRING}}},
            "304": {"description": "Not Modified"},
            "404": _error_ref("Order not found"),
        },
    })
    return {
        "/orders": {
            "get": list_op,
            "post": {
                "summary": "Create an order (status pending)",
                "requestBody": {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/OrderCreate"}}}},
                "responses": {"201": _json_ok("#/components/schemas/Order", "Created"), "400": _error_ref("Validation error")},
            },
            "patch": _secured({
                "summary": "Transition order status",
                "requestBody": {"content": {"application/json": {"schema": {
                    "type": "object", "required": ["id", "status"],
                    "properties": {"id": _STRING, "status": {"type": "string", "enum": list(Order.ALL_STATUSES)}},
                }}}},
                "responses": {
                    "200": _json_ok("#/components/schemas/Order"),
                    "400": _error_ref("Invalid transition"),
                    "403": _error_ref("Missing permission"),
                    "404": _error_ref("Order not found"),
                },
            }),
        },
        "/orders/stats": {"get": _secured({"summary": "Order counts per status plus queue", "responses": {"200": {"description": "OK"}}})},
        "/queue": {"get": {"summary": "Documents queued and total estimated minutes", "responses": {"200": _json_ok("#/components/schemas/Queue")}}},
        "/quote": {"get": {"summary": "Price quote", "responses": {"200": {"description": "OK"}, "400": _error_ref("Validation error")}}},
        "/upload": {"post": {
            "summary": "Upload a document or payment proof (multipart field 'file', optional 'kind')",
            "responses": {"200": {"description": "fileName, filePath, fileUrl"}, "400": _error_ref("Type or size rejected"), "500": _error_ref("Storage failure")},
        }},
        "/delete-file": {"post": _secured({
            "summary": "Purge an order's document or payment proof",
            "responses": {"200": {"description": "Deleted"}, "400": _error_ref("No file to delete"), "404": _error_ref("Order not found"), "500": _error_ref("Storage failure")},
        })},
        "/cleanup": {"post": _secured({
            "summary": "Run the expiry sweep (scheduler token or admin JWT with FILES.SWEEP)",
            "responses": {"200": {"description": "Sweep report"}, "403": _error_ref("Missing permission")},
        }, "cleanupToken", "bearerAuth")},
        "/auth/login": {"post": {"summary": "Admin login", "responses": {"200": {"description": "access_token"}, "401": _error_ref("Invalid credentials")}}},
        "/auth/me": {"get": _secured({"summary": "Current admin", "responses": {"200": {"description": "OK"}}})},
    }


def build_openapi_spec() -> Dict[str, Any]:
    creation_required: List[str] = ["customer_name", "contact", "file_name", "color_mode", "copies"]
    components: Dict[str, Any] = {
        "schemas": {
            "Order": _order_schema(),
            "OrderCreate": {
                "type": "object",
                "required": creation_required,
                "properties": {k: v for k, v in _order_schema()["properties"].items()
                               if k in creation_required + ["pages", "paper_size", "notes", "file_url", "file_path", "payment_proof_url", "payment_proof_path"]},
            },
            "OrderTracking": {"type": "object", "properties": {k: _order_schema()["properties"][k] for k in TRACKING_FIELDS}},
            "Queue": {"type": "object", "properties": {"count": {"type": "integer"}, "estimated_time": {"type": "integer"}}},
            "Error": {
                "type": "object",
                "properties": {"error": {"type": "object", "properties": {
                    "status": {"type": "integer"}, "title": _STRING, "detail": _STRING, "kind": _STRING,
                }}},
            },
        },
        "securitySchemes": {
            "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
            "cleanupToken": {"type": "apiKey", "in": "header", "name": "X-Cleanup-Token"},
        },
    }
    return {
        "openapi": "3.0.3",
        "info": {"title": "PrintDesk API", "version": "1.0.0"},
        "paths": _paths(),
        "components": components,
    }
