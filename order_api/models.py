# models.py

from dataclasses import dataclass, field
from typing import List

# Domain entities as returned by the repositories


@dataclass
class Customer:
    id: str
    name: str
    email: str
    created_at: str
    updated_at: str


@dataclass
class Product:
    id: str
    name: str
    price: float
    quantity: int
    created_at: str
    updated_at: str


@dataclass
class OrderProduct:
    # price is a snapshot of the product price when the order was placed
    id: str
    order_id: str
    product_id: str
    price: float
    quantity: int


@dataclass
class Order:
    id: str
    customer: Customer
    created_at: str
    updated_at: str
    order_products: List[OrderProduct] = field(default_factory=list)
