"""
FastAPI application exposing the compliance engine.

The service is stateless apart from the shared `RuleCatalog`, so several
workers can run side by side behind the web client.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from content_compliance import get_version
from content_compliance.compliance.catalog import RuleCatalog, SupabaseRuleSource
from content_compliance.config.domains import DOMAINS
from content_compliance.config.settings import EngineConfig, SupabaseSettings
from content_compliance.services.engine import ComplianceEngine
from content_compliance.storage.audit import AuditDispatcher, AuditSink, JsonlAuditSink, SupabaseAuditSink
from content_compliance.storage.supabase import SupabaseRestClient

from .schema import (
    ValidationRequestModel,
    get_validation_result_schema,
    serialize_result,
    serialize_rule_set,
)

load_dotenv()

logger = logging.getLogger("content_compliance.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)

DEFAULT_AUDIT_PATH = Path("var/compliance_audit.jsonl")


class EngineRegistry:
    """One engine per domain, all sharing a catalog, config and audit dispatcher."""

    def __init__(
        self,
        catalog: RuleCatalog,
        config: Optional[EngineConfig] = None,
        audit: Optional[AuditDispatcher] = None,
    ):
        self.catalog = catalog
        self.config = config or EngineConfig()
        self.audit = audit
        # Built eagerly so weight misconfiguration stops the service at startup.
        self.engines: Dict[str, ComplianceEngine] = {
            name: ComplianceEngine(domain=name, catalog=catalog, config=self.config, audit=audit)
            for name in DOMAINS
        }
        if catalog.source is not None:
            self.refresh_all()

    def refresh_all(self) -> None:
        """Fetch hosted rules for every domain; failures keep the built-in rules."""
        for name in self.engines:
            self.catalog.refresh(name)

    def close(self) -> None:
        if self.audit is not None:
            self.audit.close()

    def get(self, domain: str) -> ComplianceEngine:
        engine = self.engines.get(domain)
        if engine is None:
            raise HTTPException(status_code=404, detail=f"Unknown compliance domain '{domain}'.")
        return engine


def _resolve_registry() -> EngineRegistry:
    settings = SupabaseSettings.from_env()
    sink: Optional[AuditSink] = None
    source = None
    if settings is not None:
        client = SupabaseRestClient(settings)
        source = SupabaseRuleSource(client)
        sink = SupabaseAuditSink(client)
    else:
        audit_path = Path(os.getenv("CONTENT_COMPLIANCE_AUDIT_LOG", str(DEFAULT_AUDIT_PATH)))
        sink = JsonlAuditSink(audit_path)
        logger.info("Supabase not configured; auditing to JSONL", extra={"audit_path": str(audit_path)})
    return EngineRegistry(
        catalog=RuleCatalog(source=source),
        config=EngineConfig.from_env(),
        audit=AuditDispatcher(sink),
    )


def create_app(registry: EngineRegistry | None = None) -> FastAPI:
    """
    Build a FastAPI app exposing validation and rule-catalog routes.

    Args:
        registry: Optional pre-configured engines (useful for tests).

    Returns:
        FastAPI instance with routes registered.
    """

    registry_instance = registry or _resolve_registry()

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        yield
        # Drain queued audit records before the worker exits.
        registry_instance.close()

    app = FastAPI(title="Content Compliance API", version=get_version(), lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=os.getenv("CONTENT_COMPLIANCE_CORS_ORIGINS", "*").split(","),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_registry() -> EngineRegistry:
        return registry_instance

    @app.get("/")
    def root() -> dict:
        """Health endpoint for quick status checks."""

        return {"status": "ok"}

    @app.get("/domains")
    def list_domains(registry_dep: EngineRegistry = Depends(get_registry)) -> List[dict]:
        return [
            {
                "domain": name,
                "description": engine.profile.description,
                "weights": {category.value: weight for category, weight in engine.profile.weights.items()},
                "catalogState": registry_dep.catalog.state(name).value,
            }
            for name, engine in registry_dep.engines.items()
        ]

    @app.get("/domains/{domain}/rules")
    def get_rules(domain: str, registry_dep: EngineRegistry = Depends(get_registry)) -> Dict[str, Any]:
        engine = registry_dep.get(domain)
        return serialize_rule_set(engine.rule_set)

    @app.post("/domains/{domain}/rules/refresh")
    def refresh_rules(domain: str, registry_dep: EngineRegistry = Depends(get_registry)) -> Dict[str, Any]:
        registry_dep.get(domain)
        rule_set = registry_dep.catalog.refresh(domain)
        return {
            "domain": domain,
            "version": rule_set.version,
            "state": registry_dep.catalog.state(domain).value,
            "rules": len(rule_set.rules),
        }

    @app.post("/domains/{domain}/validate")
    def validate(
        domain: str,
        payload: ValidationRequestModel,
        registry_dep: EngineRegistry = Depends(get_registry),
    ) -> Dict[str, Any]:
        engine = registry_dep.get(domain)
        result = engine.validate(payload.to_request())
        return serialize_result(result)

    @app.get("/schema/validation-result")
    def validation_result_schema() -> Dict[str, Any]:
        return get_validation_result_schema()

    return app


__all__ = ["create_app", "EngineRegistry"]
