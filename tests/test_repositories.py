import pytest

from order_api.database import create_connection, create_tables
from order_api.repositories import SqliteCustomersRepository, SqliteOrdersRepository, SqliteProductsRepository


@pytest.fixture
def conn(tmp_path):
    conn = create_connection(str(tmp_path / "orders.db"))
    create_tables(conn)
    yield conn
    conn.close()


def test_customer_lookups(conn):
    repo = SqliteCustomersRepository(conn)
    customer = repo.create(name="Ada", email="ada@example.com")

    assert repo.find_by_id(customer.id) == customer
    assert repo.find_by_email("ada@example.com") == customer
    assert repo.find_by_id("missing") is None
    assert repo.find_by_email("nobody@example.com") is None


def test_find_all_by_id_omits_unknown_ids(conn):
    repo = SqliteProductsRepository(conn)
    keyboard = repo.create(name="Keyboard", price=5.0, quantity=10)
    mouse = repo.create(name="Mouse", price=3.0, quantity=2)

    found = repo.find_all_by_id([{"id": keyboard.id}, {"id": "missing"}, {"id": mouse.id}])

    assert sorted(p.id for p in found) == sorted([keyboard.id, mouse.id])
    assert repo.find_all_by_id([]) == []
    assert repo.find_by_name("Mouse") == mouse


def test_update_quantity_overwrites_stock(conn):
    repo = SqliteProductsRepository(conn)
    keyboard = repo.create(name="Keyboard", price=5.0, quantity=10)
    mouse = repo.create(name="Mouse", price=3.0, quantity=2)

    repo.update_quantity([{"id": keyboard.id, "quantity": 7}, {"id": mouse.id, "quantity": 0}])

    assert repo.find_by_name("Keyboard").quantity == 7
    assert repo.find_by_name("Mouse").quantity == 0


def test_order_is_stored_with_line_items(conn):
    customer = SqliteCustomersRepository(conn).create(name="Ada", email="ada@example.com")
    product = SqliteProductsRepository(conn).create(name="Keyboard", price=5.0, quantity=10)
    repo = SqliteOrdersRepository(conn)

    order = repo.create(customer=customer, products=[{"product_id": product.id, "price": 5.0, "quantity": 3}])
    loaded = repo.find_by_id(order.id)

    assert loaded == order
    assert loaded.customer == customer
    assert [(i.product_id, i.price, i.quantity) for i in loaded.order_products] == [(product.id, 5.0, 3)]
    assert repo.find_by_id("missing") is None


def test_repositories_leave_commit_to_the_caller(conn):
    SqliteCustomersRepository(conn).create(name="Ada", email="ada@example.com")
    conn.rollback()

    assert SqliteCustomersRepository(conn).find_by_email("ada@example.com") is None
