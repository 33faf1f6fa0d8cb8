# config.py

import os

# Settings are read from environment variables with local defaults
DB_FILE = os.getenv("ORDERS_DB", "orders.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
