"""
Catalog routes - products, employees and product administration.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from supply_orders.api.dependencies import get_catalog
from supply_orders.api.helpers import raise_for_error, unwrap
from supply_orders.catalog.employees import find_employee
from supply_orders.catalog.products import list_suppliers

router = APIRouter()

# ── Pydantic models ──────────────────────────────────────────────

class ProductForm(BaseModel):
    """Admin register/update form."""
    name: str = ""
    category: str = ""
    price: Optional[float] = None
    unit: str = ""
    stock_status: str = ""
    supplier: str = ""
    image: str = ""


class ProductUpdateForm(ProductForm):
    updater: str = Field("", description="Who made the change, recorded in ProductHistory")


class ProductRegisterResponse(BaseModel):
    id: str
    message: str


class ProductUpdateResponse(BaseModel):
    id: str
    changed_fields: List[str] = []
    message: str


# ── Routes ────────────────────────────────────────────────────────

@router.get(
    "/products",
    summary="List catalog products",
)
async def list_products(
    category: Optional[str] = Query(None, description="Only products in this category"),
    catalog=Depends(get_catalog),
):
    products = unwrap(catalog.fetch_products())
    if category:
        products = [p for p in products if p.category == category]
    return {
        "products": [p.to_dict() for p in products],
        "suppliers": list_suppliers(products),
    }


@router.post(
    "/products",
    response_model=ProductRegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new product",
)
async def register_product(form: ProductForm, catalog=Depends(get_catalog)):
    """Name, price and supplier are required; the id is assigned by the server."""
    result = catalog.register_product(form.model_dump())
    if not result.success:
        raise_for_error(result.error_type, result.message)
    return ProductRegisterResponse(id=result.data, message=result.message)


@router.put(
    "/products/{product_id}",
    response_model=ProductUpdateResponse,
    summary="Update a product",
)
async def update_product(product_id: str, form: ProductUpdateForm, catalog=Depends(get_catalog)):
    """Every changed field is written to the ProductHistory audit tab."""
    data = form.model_dump()
    updater = data.pop("updater", "")
    result = catalog.update_product(product_id, data, updater=updater)
    if not result.success:
        raise_for_error(result.error_type, result.message)
    return ProductUpdateResponse(id=product_id, changed_fields=result.data, message=result.message)


@router.get(
    "/employees",
    summary="List employees",
)
async def list_employees(catalog=Depends(get_catalog)):
    employees = unwrap(catalog.fetch_employees())
    return {"employees": [e.to_dict() for e in employees]}


@router.get(
    "/employees/{code}",
    summary="Look up an employee by code",
)
async def get_employee(code: str, catalog=Depends(get_catalog)):
    """Codes shorter than the minimum lookup length never match."""
    employee = find_employee(unwrap(catalog.fetch_employees()), code)
    if employee is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found")
    return employee.to_dict()
