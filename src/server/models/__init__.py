# src/server/models/__init__.py
from .product import Product
from .client import Client
from .quote import Quote, QuoteItem, QUOTE_STATUSES
from .transaction import StockTransaction, TRANSACTION_TYPES

__all_models = [Product, Client, Quote, QuoteItem, StockTransaction]
