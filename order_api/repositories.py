# repositories.py

import uuid
from datetime import datetime, timezone
from sqlite3 import Connection, Row
from typing import List, Optional, Protocol, TypedDict

from order_api.models import Customer, Order, OrderProduct, Product


# Data passed to the repositories

class ProductId(TypedDict):
    id: str

class UpdateProductQuantity(TypedDict):
    # absolute stock value, not a delta
    id: str
    quantity: int

class OrderProductData(TypedDict):
    product_id: str
    price: float
    quantity: int


# Contracts consumed by the services

class CustomersRepository(Protocol):
    def find_by_id(self, customer_id: str) -> Optional[Customer]: ...

    def find_by_email(self, email: str) -> Optional[Customer]: ...

    def create(self, name: str, email: str) -> Customer: ...


class ProductsRepository(Protocol):
    def find_by_name(self, name: str) -> Optional[Product]: ...

    def find_all_by_id(self, products: List[ProductId]) -> List[Product]:
        """ Batch lookup, ids without a matching product are left out of the result. """
        ...

    def update_quantity(self, products: List[UpdateProductQuantity]) -> None: ...

    def create(self, name: str, price: float, quantity: int) -> Product: ...


class OrdersRepository(Protocol):
    def create(self, customer: Customer, products: List[OrderProductData]) -> Order: ...

    def find_by_id(self, order_id: str) -> Optional[Order]: ...


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# SQLite implementations. They never commit: the caller owns the transaction.

class SqliteCustomersRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def find_by_id(self, customer_id: str) -> Optional[Customer]:
        cursor = self.conn.cursor()
        cursor.execute(
            "SELECT id, name, email, created_at, updated_at FROM customers WHERE id = ?",
            (customer_id,),
        )
        row = cursor.fetchone()
        return _to_customer(row) if row else None

    def find_by_email(self, email: str) -> Optional[Customer]:
        cursor = self.conn.cursor()
        cursor.execute(
            "SELECT id, name, email, created_at, updated_at FROM customers WHERE email = ?",
            (email,),
        )
        row = cursor.fetchone()
        return _to_customer(row) if row else None

    def create(self, name: str, email: str) -> Customer:
        now = _now()
        customer = Customer(id=str(uuid.uuid4()), name=name, email=email, created_at=now, updated_at=now)
        self.conn.execute(
            """
            INSERT INTO customers (id, name, email, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (customer.id, customer.name, customer.email, customer.created_at, customer.updated_at),
        )
        return customer


class SqliteProductsRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def find_by_name(self, name: str) -> Optional[Product]:
        cursor = self.conn.cursor()
        cursor.execute(
            "SELECT id, name, price, quantity, created_at, updated_at FROM products WHERE name = ?",
            (name,),
        )
        row = cursor.fetchone()
        return _to_product(row) if row else None

    def find_all_by_id(self, products: List[ProductId]) -> List[Product]:
        ids = [product["id"] for product in products]
        if not ids:
            return []
        placeholders = ", ".join("?" for _ in ids)
        cursor = self.conn.cursor()
        cursor.execute(
            f"SELECT id, name, price, quantity, created_at, updated_at FROM products WHERE id IN ({placeholders})",
            ids,
        )
        return [_to_product(row) for row in cursor.fetchall()]

    def update_quantity(self, products: List[UpdateProductQuantity]) -> None:
        now = _now()
        self.conn.executemany(
            "UPDATE products SET quantity = ?, updated_at = ? WHERE id = ?",
            [(product["quantity"], now, product["id"]) for product in products],
        )

    def create(self, name: str, price: float, quantity: int) -> Product:
        now = _now()
        product = Product(
            id=str(uuid.uuid4()), name=name, price=price, quantity=quantity, created_at=now, updated_at=now
        )
        self.conn.execute(
            """
            INSERT INTO products (id, name, price, quantity, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (product.id, product.name, product.price, product.quantity, product.created_at, product.updated_at),
        )
        return product


class SqliteOrdersRepository:
    def __init__(self, conn: Connection):
        self.conn = conn

    def create(self, customer: Customer, products: List[OrderProductData]) -> Order:
        now = _now()
        order = Order(id=str(uuid.uuid4()), customer=customer, created_at=now, updated_at=now)
        cursor = self.conn.cursor()
        # insert into orders table
        cursor.execute(
            "INSERT INTO orders (id, customer_id, created_at, updated_at) VALUES (?, ?, ?, ?)",
            (order.id, customer.id, order.created_at, order.updated_at),
        )
        # insert one line item per product
        for product in products:
            item = OrderProduct(
                id=str(uuid.uuid4()),
                order_id=order.id,
                product_id=product["product_id"],
                price=product["price"],
                quantity=product["quantity"],
            )
            cursor.execute(
                """
                INSERT INTO orders_products (id, order_id, product_id, price, quantity)
                VALUES (?, ?, ?, ?, ?)
                """,
                (item.id, item.order_id, item.product_id, item.price, item.quantity),
            )
            order.order_products.append(item)
        return order

    def find_by_id(self, order_id: str) -> Optional[Order]:
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT o.id, o.created_at, o.updated_at,
                   c.id AS customer_id, c.name, c.email,
                   c.created_at AS customer_created_at, c.updated_at AS customer_updated_at
            FROM orders o JOIN customers c ON c.id = o.customer_id
            WHERE o.id = ?
            """,
            (order_id,),
        )
        row = cursor.fetchone()
        if row is None:
            return None

        customer = Customer(
            id=row["customer_id"],
            name=row["name"],
            email=row["email"],
            created_at=row["customer_created_at"],
            updated_at=row["customer_updated_at"],
        )
        order = Order(id=row["id"], customer=customer, created_at=row["created_at"], updated_at=row["updated_at"])

        cursor.execute(
            "SELECT id, order_id, product_id, price, quantity FROM orders_products WHERE order_id = ? ORDER BY rowid",
            (order_id,),
        )
        order.order_products = [OrderProduct(**dict(item)) for item in cursor.fetchall()]
        return order


def _to_customer(row: Row) -> Customer:
    return Customer(**dict(row))

def _to_product(row: Row) -> Product:
    return Product(**dict(row))
