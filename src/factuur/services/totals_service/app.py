from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import FastAPI
from pydantic import BaseModel, Field

from ...engine import DocumentEngine
from ...logging_setup import setup_logging
from ...models import Document, DocumentsSummary, DocumentTotals, DocumentView
from ...presentation import render_payload


class TotalsRequest(BaseModel):
    items: list[dict[str, Any]] = Field(default_factory=list)
    prices_include_vat: bool | None = None
    vat_rate: Decimal | None = None


class SummaryRequest(BaseModel):
    documents: list[Document] = Field(default_factory=list)


def create_app(engine: DocumentEngine) -> FastAPI:
    app = FastAPI(title="Factuur Totals Service", version="0.1.0")

    @app.get("/healthz")
    def healthz() -> dict:
        return {"status": "ok"}

    @app.post("/totals", response_model=DocumentTotals)
    def totals(req: TotalsRequest) -> DocumentTotals:
        document = Document(items=req.items, prices_include_vat=req.prices_include_vat, vat_rate=req.vat_rate)
        return engine.totals(document)

    @app.post("/documents/view", response_model=DocumentView)
    def document_view(document: Document) -> DocumentView:
        return engine.view(document)

    @app.post("/documents/payload")
    def document_payload(document: Document) -> dict:
        return render_payload(engine.view(document))

    @app.post("/documents/summary", response_model=DocumentsSummary)
    def documents_summary(req: SummaryRequest) -> DocumentsSummary:
        return engine.summarize(req.documents)

    return app


setup_logging()
app = create_app(DocumentEngine.detect())
