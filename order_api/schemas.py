# schemas.py

from typing import List

from pydantic import BaseModel, ConfigDict, Field

# Pydantic models for request and response

MAX_ORDER_PRODUCTS = 100

class CustomerRequest(BaseModel):
    # Fields that client sends in Request
    name: str = Field(..., min_length=1, examples=["Ada Lovelace"])
    email: str = Field(..., min_length=3, examples=["ada@example.com"])

class ProductRequest(BaseModel):
    name: str = Field(..., min_length=1, examples=["Keyboard"])
    price: float = Field(..., ge=0, allow_inf_nan=False, examples=[49.9])
    quantity: int = Field(..., ge=0, examples=[10])

class OrderItemRequest(BaseModel):
    id: str = Field(..., examples=["item-9"])
    quantity: int = Field(..., ge=1, examples=[1])

class OrderRequest(BaseModel):
    customer_id: str = Field(..., examples=["cust-42"])
    # bounded so the batch lookup stays under the SQLite bound variable limit
    products: List[OrderItemRequest] = Field(..., min_length=1, max_length=MAX_ORDER_PRODUCTS)


class CustomerResponse(BaseModel):
    # Fields that appear in Response body
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    created_at: str
    updated_at: str

class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    price: float
    quantity: int
    created_at: str
    updated_at: str

class OrderProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    order_id: str
    product_id: str
    price: float
    quantity: int

class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer: CustomerResponse
    order_products: List[OrderProductResponse]
    created_at: str
    updated_at: str

class ErrorResponse(BaseModel):
    status: str = Field("error", examples=["error"])
    message: str = Field(..., examples=["Customer not found."])
