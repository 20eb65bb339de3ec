# backend/stocktrail/api/schemas.py

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # attributes stay snake_case, JSON goes out camelCase
    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


# ---------- IN ----------

class ProductIn(BaseModel):
    # everything optional on purpose: the service reports missing fields
    # with its own messages instead of a generic 422
    name: Optional[str] = None
    unit: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    status: Optional[str] = None
    stock: Optional[Union[int, float, str]] = None
    image: Optional[str] = None


# ---------- OUT ----------

class Product(CamelModel):
    id: int
    name: str
    unit: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    stock: int
    status: Optional[str] = None
    image: Optional[str] = None

    # DB returns datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class InventoryLog(CamelModel):
    id: int
    product_id: int
    old_stock: int
    new_stock: int
    changed_by: str
    timestamp: Optional[datetime] = None


class Pagination(CamelModel):
    total_items: int
    total_pages: int
    current_page: int
    limit: int


class ProductPage(CamelModel):
    status: Literal["success"] = "success"
    data: List[Product]
    pagination: Pagination


class ProductEnvelope(CamelModel):
    status: Literal["success"] = "success"
    data: Product


class HistoryEnvelope(CamelModel):
    status: Literal["success"] = "success"
    data: List[InventoryLog]


class Duplicate(CamelModel):
    name: str
    existing_id: int


class ImportResult(CamelModel):
    status: Literal["success"] = "success"
    message: str
    added: int
    skipped: int
    duplicates: List[Duplicate]


class Deleted(CamelModel):
    status: Literal["success"] = "success"
    message: str


class ErrorOut(BaseModel):
    status: Literal["fail", "error"]
    message: str
