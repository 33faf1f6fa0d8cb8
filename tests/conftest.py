import copy

import pytest

from order_api.models import Customer, Order, OrderProduct, Product


NOW = "2026-01-01T00:00:00+00:00"


class FakeCustomersRepository:
    def __init__(self, customers=None):
        self.customers = {c.id: c for c in customers or []}
        self.created = []

    def find_by_id(self, customer_id):
        return self.customers.get(customer_id)

    def find_by_email(self, email):
        return next((c for c in self.customers.values() if c.email == email), None)

    def create(self, name, email):
        customer = Customer(id=f"C{len(self.customers) + 1}", name=name, email=email, created_at=NOW, updated_at=NOW)
        self.customers[customer.id] = customer
        self.created.append(customer)
        return customer


class FakeProductsRepository:
    """ Keeps products in memory and records every call that would write. """

    def __init__(self, products=None):
        self.products = {p.id: p for p in products or []}
        self.lookups = []
        self.updates = []
        self.created = []

    def find_by_name(self, name):
        return next((p for p in self.products.values() if p.name == name), None)

    def find_all_by_id(self, products):
        self.lookups.append(list(products))
        ids = {p["id"] for p in products}
        # copies, like rows freshly read from a database
        return [copy.copy(p) for p in self.products.values() if p.id in ids]

    def update_quantity(self, products):
        self.updates.append(list(products))
        for product in products:
            self.products[product["id"]].quantity = product["quantity"]

    def create(self, name, price, quantity):
        product = Product(
            id=f"P{len(self.products) + 1}", name=name, price=price, quantity=quantity, created_at=NOW, updated_at=NOW
        )
        self.products[product.id] = product
        self.created.append(product)
        return product


class FakeOrdersRepository:
    def __init__(self):
        self.orders = {}

    def create(self, customer, products):
        order_id = f"O{len(self.orders) + 1}"
        order = Order(
            id=order_id,
            customer=customer,
            created_at=NOW,
            updated_at=NOW,
            order_products=[
                OrderProduct(id=f"{order_id}-{i}", order_id=order_id, **product)
                for i, product in enumerate(products, start=1)
            ],
        )
        self.orders[order_id] = order
        return order

    def find_by_id(self, order_id):
        return self.orders.get(order_id)


@pytest.fixture
def customers_repository():
    return FakeCustomersRepository(
        [Customer(id="C1", name="Ada", email="ada@example.com", created_at=NOW, updated_at=NOW)]
    )


@pytest.fixture
def products_repository():
    return FakeProductsRepository(
        [
            Product(id="P1", name="Keyboard", price=5.0, quantity=10, created_at=NOW, updated_at=NOW),
            Product(id="P2", name="Mouse", price=3.0, quantity=2, created_at=NOW, updated_at=NOW),
        ]
    )


@pytest.fixture
def orders_repository():
    return FakeOrdersRepository()
