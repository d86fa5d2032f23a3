"""
Admin back office routes - dashboard, bulk import and export
"""
import logging
from datetime import date, datetime
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from app.api.deps import require_admin
from app.models.user import User
from app.schemas.dashboard import DashboardSummary, ImportResult
from app.schemas.order import OrderDetail
from app.schemas.product import ProductResponse
from app.schemas.user import UserResponse
from app.services.catalog_service import CatalogService
from app.services.dashboard import dashboard_summary
from app.services.import_export import parse_import_body, render_export
from app.services.order_service import OrderService
from app.services.user_service import UserService
from app.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard(
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    return await dashboard_summary(storage)


async def _import_records(request: Request):
    return parse_import_body(await request.body(), request.headers.get("content-type", ""))


@router.post("/products/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_products(
    request: Request,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """JSON array or CSV; rows failing product validation are reported, not imported."""
    records = await _import_records(request)
    result = await CatalogService(storage).import_products(records)
    logger.info(f"Admin {admin.username} imported {result['imported']} product(s)")
    return ImportResult(message=f"Imported {result['imported']} product(s)", **result)


@router.post("/users/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_users(
    request: Request,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    records = await _import_records(request)
    result = await UserService(storage).import_users(records)
    logger.info(f"Admin {admin.username} imported {result['imported']} user(s)")
    return ImportResult(message=f"Imported {result['imported']} user(s)", **result)


@router.post("/orders/import", response_model=ImportResult, status_code=status.HTTP_201_CREATED)
async def import_orders(
    request: Request,
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """Orders without items are skipped; the rest go through the checkout defaults."""
    records = await _import_records(request)
    result = await OrderService(storage).import_orders(records)
    logger.info(f"Admin {admin.username} imported {result['imported']} order(s)")
    return ImportResult(message=f"Imported {result['imported']} order(s)", **result)


def _in_range(created_at: Optional[datetime], date_from: Optional[date], date_to: Optional[date]) -> bool:
    if created_at is None:
        return date_from is None and date_to is None
    day = created_at.date()
    if date_from and day < date_from:
        return False
    if date_to and day > date_to:
        return False
    return True


@router.get("/export/{entity}")
async def export_entity(
    entity: Literal["products", "orders", "users"],
    format: Literal["csv", "json"] = Query("csv"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    admin: User = Depends(require_admin),
    storage: Storage = Depends(get_storage),
):
    """
    Download the full current list. Orders include their items and can be
    narrowed to a creation date range. Password hashes are never exported.
    """
    if entity == "products":
        rows = [
            ProductResponse.model_validate(p).model_dump(mode="json", by_alias=True)
            for p in await storage.list_products()
        ]
    elif entity == "users":
        rows = [
            UserResponse.model_validate(u).model_dump(mode="json", by_alias=True)
            for u in await storage.list_users()
        ]
    else:
        rows = []
        for order in await storage.list_orders():
            if not _in_range(order.created_at, date_from, date_to):
                continue
            items = await storage.get_order_items(order.id)
            rows.append(OrderDetail.from_order(order, items).model_dump(mode="json", by_alias=True))

    content, media_type = render_export(rows, format)
    filename = f"{entity}_export_{date.today().strftime('%Y%m%d')}.{format}"
    logger.info(f"Admin {admin.username} exported {len(rows)} {entity} as {format}")
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
