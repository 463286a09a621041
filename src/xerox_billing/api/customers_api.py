"""
Customers API - FastAPI router for customers, line items and bills.
"""
from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from typing import Optional

from ..engine.models import Customer
from ..exceptions import CustomerNotFoundError, LineItemNotFoundError
from .state import get_session

router = APIRouter(prefix="/customers", tags=["customers"])


# Pydantic models for API
class CustomerCreate(BaseModel):
    """Request model for adding a customer."""
    name: Optional[str] = None


class CustomerUpdate(BaseModel):
    """Request model for updating customer settings."""
    name: Optional[str] = None
    round_individual: Optional[bool] = None
    round_total: Optional[bool] = None
    discount: Optional[float] = None
    tax: Optional[float] = None
    show_rounding_options: Optional[bool] = None


class ItemCreate(BaseModel):
    """Request model for recording a print job."""
    name: str
    type: str
    pages: int = 0
    sets: int = 1


class ItemUpdate(BaseModel):
    name: Optional[str] = None
    type: Optional[str] = None
    pages: Optional[int] = None
    sets: Optional[int] = None


def customer_out(customer: Customer) -> dict:
    """Customer as JSON with items as an ordered list."""
    data = jsonable_encoder(customer, exclude={'items'})
    data['items'] = jsonable_encoder(customer.item_list())
    return data


# Endpoints

@router.get("")
async def list_customers():
    """List customers in tab order."""
    return [customer_out(c) for c in get_session().list_customers()]


@router.post("")
async def add_customer(req: CustomerCreate):
    return customer_out(get_session().add_customer(req.name))


@router.get("/{customer_id}")
async def get_customer(customer_id: str):
    try:
        return customer_out(get_session().get_customer(customer_id))
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.put("/{customer_id}")
async def update_customer(customer_id: str, updates: CustomerUpdate):
    """Update only the fields provided in the request body."""
    try:
        customer = get_session().update_customer(customer_id, **updates.model_dump(exclude_unset=True))
        return customer_out(customer)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{customer_id}")
async def delete_customer(customer_id: str):
    try:
        customer = get_session().delete_customer(customer_id)
        return {"success": True, "message": f"Customer '{customer.name}' deleted"}
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/{customer_id}/items")
async def add_item(customer_id: str, req: ItemCreate):
    try:
        item = get_session().add_item(customer_id, req.name, req.type, req.pages, req.sets)
        return jsonable_encoder(item)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.put("/{customer_id}/items/{item_id}")
async def update_item(customer_id: str, item_id: str, updates: ItemUpdate):
    try:
        item = get_session().update_item(customer_id, item_id, **updates.model_dump(exclude_unset=True))
        return jsonable_encoder(item)
    except (CustomerNotFoundError, LineItemNotFoundError) as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{customer_id}/items/{item_id}")
async def delete_item(customer_id: str, item_id: str):
    try:
        get_session().delete_item(customer_id, item_id)
        return {"success": True}
    except (CustomerNotFoundError, LineItemNotFoundError) as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.delete("/{customer_id}/items")
async def clear_items(customer_id: str):
    try:
        removed = get_session().clear_items(customer_id)
        return {"success": True, "removed": removed}
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/{customer_id}/bill")
async def get_bill(customer_id: str):
    """Priced bill with trace, warnings and the shareable text."""
    session = get_session()
    try:
        bill = session.price_customer(customer_id)
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    data = jsonable_encoder(bill)
    data['text'] = session.engine.render_bill(bill)
    return data


@router.post("/{customer_id}/bill/record")
async def record_bill(customer_id: str):
    try:
        return jsonable_encoder(get_session().record_bill(customer_id))
    except CustomerNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
