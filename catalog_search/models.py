"""Pydantic models for request/response payloads."""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=500)
    description: str = ""
    rating: float = Field(default=0, ge=0, le=5)
    stock: int = Field(default=0, ge=0)
    price: float = Field(..., ge=0)
    mrp: float | None = Field(default=None, ge=0)
    currency: str = "Rupee"
    brand: str | None = None
    category: str | None = None


class MetadataUpdate(BaseModel):
    productId: int = Field(..., ge=1)
    metadata: Dict[str, str]


class ProductResult(BaseModel):
    productId: int
    title: str
    description: str = ""
    mrp: float = 0
    sellingPrice: float = 0
    metadata: Dict[str, str] = Field(default_factory=dict)
    stock: int = 0
    rating: float = 0
    brand: str = "unknown"
    category: str = "mobile"


class SearchResponse(BaseModel):
    success: bool = True
    data: List[ProductResult]
    count: int


class SuggestionResponse(BaseModel):
    success: bool = True
    data: List[str]


class PriceBounds(BaseModel):
    min: float
    max: float


class FilterFacets(BaseModel):
    brands: List[str]
    categories: List[str]
    priceRange: PriceBounds


class FiltersResponse(BaseModel):
    success: bool = True
    data: FilterFacets


class ProductCreated(BaseModel):
    success: bool = True
    productId: int


class MetadataUpdated(BaseModel):
    success: bool = True
    productId: int
    metadata: Dict[str, str]


class ProductResponse(BaseModel):
    success: bool = True
    data: ProductResult


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class ProductListResponse(BaseModel):
    success: bool = True
    data: List[ProductResult]
    pagination: Pagination


class MessageResponse(BaseModel):
    success: bool = True
    message: str
