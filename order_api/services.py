# services.py

from typing import List, TypedDict

from order_api.errors import AppError, ErrorKind
from order_api.logger import log_debug
from order_api.models import Customer, Order, Product
from order_api.repositories import (
    CustomersRepository,
    OrderProductData,
    OrdersRepository,
    ProductsRepository,
    UpdateProductQuantity,
)


class OrderItem(TypedDict):
    # product id and requested amount
    id: str
    quantity: int


class CreateOrderService:
    """
    Create an order for a customer.

    Runs the checks in a fixed sequence: customer exists, quantities are
    positive, every product exists, every product has enough stock. Stock is
    only decremented and the order only persisted once all checks passed.
    """

    def __init__(
        self,
        orders_repository: OrdersRepository,
        products_repository: ProductsRepository,
        customers_repository: CustomersRepository,
    ):
        self.orders_repository = orders_repository
        self.products_repository = products_repository
        self.customers_repository = customers_repository

    def execute(self, customer_id: str, products: List[OrderItem]) -> Order:
        customer = self.customers_repository.find_by_id(customer_id)
        if customer is None:
            raise AppError(ErrorKind.CUSTOMER_NOT_FOUND, "Customer not found.")

        if any(product["quantity"] <= 0 for product in products):
            raise AppError(ErrorKind.INVALID_QUANTITY, "Product quantity must be greater than zero.")

        # duplicates are kept, the count check below relies on it
        products_ids = [{"id": product["id"]} for product in products]
        found_products = self.products_repository.find_all_by_id(products_ids)

        if len(products) != len(found_products):
            raise AppError(ErrorKind.PRODUCTS_NOT_FOUND, "One or more products not found.")

        quantities_to_update: List[UpdateProductQuantity] = []
        order_products: List[OrderProductData] = []
        products_without_stock: List[Product] = []

        for found_product in found_products:
            # first matching request entry only
            order_product = next((product for product in products if product["id"] == found_product.id), None)
            if order_product is None:
                continue

            remaining = found_product.quantity - order_product["quantity"]
            if remaining < 0:
                products_without_stock.append(found_product)
            else:
                quantities_to_update.append({"id": found_product.id, "quantity": remaining})
                order_products.append(
                    {
                        "product_id": found_product.id,
                        "price": found_product.price,
                        "quantity": order_product["quantity"],
                    }
                )

        if products_without_stock:
            raise AppError(
                ErrorKind.INSUFFICIENT_STOCK,
                f"{len(products_without_stock)} products with stock not found.",
            )

        self.products_repository.update_quantity(quantities_to_update)

        order = self.orders_repository.create(customer=customer, products=order_products)
        log_debug(f"Order {order.id} created for customer {customer.id} with {len(order_products)} products")
        return order


class CreateCustomerService:
    def __init__(self, customers_repository: CustomersRepository):
        self.customers_repository = customers_repository

    def execute(self, name: str, email: str) -> Customer:
        if self.customers_repository.find_by_email(email) is not None:
            raise AppError(ErrorKind.EMAIL_IN_USE, "This e-mail is already assigned.")

        return self.customers_repository.create(name=name, email=email)


class CreateProductService:
    def __init__(self, products_repository: ProductsRepository):
        self.products_repository = products_repository

    def execute(self, name: str, price: float, quantity: int) -> Product:
        if self.products_repository.find_by_name(name) is not None:
            raise AppError(ErrorKind.PRODUCT_EXISTS, "This product already exists.")

        return self.products_repository.create(name=name, price=price, quantity=quantity)


class FindOrderService:
    """ Load one order with its customer and line items. """

    def __init__(self, orders_repository: OrdersRepository):
        self.orders_repository = orders_repository

    def execute(self, order_id: str) -> Order:
        order = self.orders_repository.find_by_id(order_id)
        if order is None:
            raise AppError(ErrorKind.ORDER_NOT_FOUND, "Order not found.")
        return order
