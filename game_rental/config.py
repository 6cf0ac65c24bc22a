"""
Runtime configuration. Connection secrets come from the environment,
everything else about the store is fixed here.
"""

import os
from dataclasses import dataclass

DB_HOST = os.getenv("GAMERENTAL_DB_HOST", "localhost")
DB_PASSWORD = os.getenv("GAMERENTAL_DB_PASSWORD", "")
DB_CHARSET = "utf8mb4"

LOG_LEVEL = os.getenv("GAMERENTAL_LOG_LEVEL", "WARNING")
LOG_FILE = os.getenv("GAMERENTAL_LOG_FILE")

ROLES = ("customer", "employee", "manager")
DEFAULT_ROLE = "customer"

RENTAL_PERIOD_DAYS = 30
RECENT_ORDER_LIMIT = 5

ORDER_ID_PREFIX = "gamerentalorder"
TRACKING_ID_PREFIX = "trackingid"
ORDER_NUMBER_MIN = 5000
ORDER_NUMBER_MAX = 100000  # exclusive
ORDER_ID_ATTEMPTS = 10

INITIAL_STATUS = "Order Placed"
INITIAL_LOCATION = "Warehouse"
INITIAL_COURIER = "CourierX"


@dataclass
class DatabaseSettings:
    database: str
    port: int
    user: str
    password: str = DB_PASSWORD
    host: str = DB_HOST
