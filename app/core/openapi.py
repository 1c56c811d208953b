"""OpenAPI customization.

Adds the admin Bearer security scheme and tag descriptions, and marks the
health endpoint as public.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {"name": "Products", "description": "Product CRUD, soft delete/restore and cached listing."},
    {"name": "Product Types", "description": "Product type CRUD."},
    {"name": "Health", "description": "Liveness check."},
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and security."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema
        schema = original_openapi()

        security_schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminToken",
            {
                "type": "http",
                "scheme": "bearer",
                "description": "Admin token via Authorization: Bearer (or the auth_token cookie).",
            },
        )
        schema.setdefault("security", [{"AdminToken": []}])

        tags = schema.setdefault("tags", [])
        known = {t.get("name") for t in tags}
        tags.extend(t for t in TAGS_METADATA if t["name"] not in known)

        for path, methods in schema.get("paths", {}).items():
            if path.endswith("/health"):
                for method_obj in methods.values():
                    if isinstance(method_obj, dict):
                        method_obj["security"] = []

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
