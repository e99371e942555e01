# WORKFLOW: Pydantic response schemas for the prices endpoint.
# Used by: Price transfer service, prices router, tests
# Schemas include:
# 1. ImportSummary - Totals reported after a committed import
# 2. ErrorResponse - Body of every error response
#
# Response flow: Import pipeline -> ImportSummary -> JSON body

from pydantic import BaseModel, Field


class ImportSummary(BaseModel):
    """Totals for one committed import."""
    total_items: int = Field(..., ge=0, description="Rows inserted by this import")
    total_categories: int = Field(..., ge=0, description="Distinct categories in the store after the import")
    total_price: float = Field(..., ge=0, description="Sum of prices inserted by this import")


class ErrorResponse(BaseModel):
    detail: str
