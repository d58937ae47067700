"""Core constants used across migration modules.

This module centralizes source contract and destination constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

SOURCE_DIR_NAME = "schema"
SOURCE_DIR_SEARCH_DEPTH = 10
DEFAULT_SOURCE_ENCODING = "utf-8"

TAB_FIELD_SEPARATOR = "\t"
PIPE_FIELD_SEPARATOR = "+|"
PIPE_RECORD_TERMINATOR = "&|"

DEFAULT_DATABASE_NAME = "adventureworks"
DEFAULT_PRODUCTS_CONTAINER = "products"
DEFAULT_CUSTOMERS_CONTAINER = "customers"
DEFAULT_SUBCATEGORY_ID_OFFSET = 100
DEFAULT_THROTTLE_FALLBACK_SECONDS = 1.0
DEFAULT_LOG_LEVEL = "INFO"

CATEGORY_BATCH_SIZE = 100
PRODUCT_MODEL_BATCH_SIZE = 100
PRODUCT_BATCH_SIZE = 100
CUSTOMER_BATCH_SIZE = 100
SALES_ORDER_BATCH_SIZE = 50

CATEGORY_ID_PREFIX = "category-"
PRODUCT_MODEL_ID_PREFIX = "model-"
PRODUCT_ID_PREFIX = "product-"
SALES_ORDER_NUMBER_PREFIX = "SO"
UNKNOWN_PRODUCT_NAME = "Unknown"
UNKNOWN_ADDRESS_TYPE = "Unknown"
DEFAULT_THUMBNAIL_FILE_NAME = "no_image_available_small.gif"

ISO_UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
JSONL_SUFFIX = ".jsonl"
