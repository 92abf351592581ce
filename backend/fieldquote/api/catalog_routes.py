"""
Catalog routes — tariff normalization and the interview tree.

GET  /api/catalog/defaults       — built-in tariff catalog
POST /api/catalog/resolve        — merge a partial tariff with the defaults
GET  /api/catalog/questionnaire  — categories, steps and choice labels
"""
import logging

from fastapi import APIRouter

from fieldquote.models.quote_schema import CatalogRequest
from fieldquote.services import questionnaire
from fieldquote.services.catalog_registry import CatalogRegistry

router = APIRouter(prefix="/api/catalog", tags=["Catalog"])
logger = logging.getLogger("fieldquote.api")


@router.get("/defaults")
async def catalog_defaults():
    return CatalogRegistry.resolve(None).to_dict()


@router.post("/resolve")
async def resolve_catalog(body: CatalogRequest):
    """Return the fully-defaulted catalog an editor should save."""
    return CatalogRegistry.resolve(body.catalog).to_dict()


@router.get("/questionnaire")
async def get_questionnaire():
    return {"categories": questionnaire.as_dict()}
