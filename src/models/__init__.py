"""
ORM entities for the library schema.
Importing this package registers every table on `Base.metadata`.
"""

from src.models.author import Author
from src.models.book import Book
from src.models.category import Category
from src.models.editorial import Editorial
from src.models.enums import BookStatus, LoanState, RecordStatus
from src.models.inventory import (
    Inventory,
    InventoryUnitsError,
    NoUnitsAvailableError,
    NothingToReturnError,
)
from src.models.loan import Loan
from src.models.user import User

__all__ = [
    "Author",
    "Book",
    "BookStatus",
    "Category",
    "Editorial",
    "Inventory",
    "InventoryUnitsError",
    "Loan",
    "LoanState",
    "NoUnitsAvailableError",
    "NothingToReturnError",
    "RecordStatus",
    "User",
]
