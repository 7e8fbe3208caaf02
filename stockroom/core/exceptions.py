class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class ItemServiceError(BaseServiceError):
    """Base exception for inventory item errors."""
    pass

class ItemCreationError(ItemServiceError):
    """Raised when item creation fails."""
    pass

class ItemNotFoundError(ItemServiceError):
    """Raised when an item id does not resolve to an existing record."""

    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Item with ID {item_id} not found")

class InsufficientStockError(ItemServiceError):
    """Raised when a decrement would drive an item's quantity below zero."""

    def __init__(self, item_id, item_name: str, available: int, requested: int):
        self.item_id = item_id
        self.item_name = item_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for item: {item_name}. "
            f"Available: {available}, Requested: {requested}"
        )

class ItemInUseError(ItemServiceError):
    """Raised when deleting an item that is still referenced by stock history."""
    pass

class ValidationError(BaseServiceError):
    """Raised when data validation fails."""
    pass

class DatabaseError(Exception):
    """Exception raised for database-related errors."""
    pass

class StaleItemError(DatabaseError):
    """Raised when an item's quantity changed underneath a compare-and-set update."""
    pass
