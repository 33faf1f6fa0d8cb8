# database.py

from sqlite3 import connect, Connection, Row

from order_api.logger import log_info, log_error

# Establish database connection
def create_connection(db_file: str) -> Connection:
    """ Create a database connection to the SQLite database specified by db_file. """
    try:
        conn = connect(db_file, check_same_thread=False)
    except Exception as e:
        log_error(f"Error connecting to database: {e}")
        raise
    # rows behave like mappings so repositories can read columns by name
    conn.row_factory = Row
    conn.execute("PRAGMA foreign_keys = ON")
    log_info(f"Connected to database: {db_file}")
    return conn

# Create tables if they don't exist
def create_tables(conn: Connection):
    """ Create tables for customers, products, orders and order line items. """
    cursor = conn.cursor()
    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS customers (
            id TEXT PRIMARY KEY NOT NULL,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS products (
            id TEXT PRIMARY KEY NOT NULL,
            name TEXT NOT NULL UNIQUE,
            price REAL NOT NULL,
            quantity INTEGER NOT NULL,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS orders (
            id TEXT PRIMARY KEY NOT NULL,
            customer_id TEXT NOT NULL REFERENCES customers(id),
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL
        )
        """
    )

    cursor.execute(
        """
        CREATE TABLE IF NOT EXISTS orders_products (
            id TEXT PRIMARY KEY NOT NULL,
            order_id TEXT NOT NULL REFERENCES orders(id),
            product_id TEXT NOT NULL REFERENCES products(id),
            price REAL NOT NULL,
            quantity INTEGER NOT NULL
        )
        """
    )
    conn.commit()
    log_info("Tables created successfully.")
