"""
app/api/routers package marker.
"""

from app.api.routers.sales_ingestion import router as sales_ingestion_router

__all__ = ["sales_ingestion_router"]
