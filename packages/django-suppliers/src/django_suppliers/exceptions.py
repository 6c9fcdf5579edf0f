"""Exceptions for django-suppliers."""


class SupplierError(Exception):
    """Base exception for supplier errors."""

    pass


class ConfigurationError(SupplierError):
    """Supplier credentials or endpoints are missing."""

    def __init__(self, supplier: str, message: str = ""):
        self.supplier = supplier
        super().__init__(message or f"{supplier} is not configured")


class SupplierRejection(SupplierError):
    """Supplier answered but refused the order (balance, stock, agent...)."""

    def __init__(self, supplier: str, message: str, code=None):
        self.supplier = supplier
        self.code = code
        super().__init__(message)


class TransportError(SupplierError):
    """Network failure or timeout talking to a supplier."""

    def __init__(self, supplier: str, message: str, original_error: Exception = None):
        self.supplier = supplier
        self.original_error = original_error
        super().__init__(f"[{supplier}] {message}")


class UnsupportedFormat(SupplierError):
    """Data amount string cannot be translated into the supplier's unit."""

    def __init__(self, data_amount: str, expected: str = '"1GB", "5GB", "500MB"'):
        self.data_amount = data_amount
        super().__init__(
            f"Invalid data amount format: {data_amount}. Expected format: {expected}, etc."
        )


class UnsupportedNetworkError(SupplierError):
    """Supplier cannot deliver on the requested network."""

    def __init__(self, supplier: str, network: str):
        self.supplier = supplier
        self.network = network
        super().__init__(f"Unsupported network for {supplier}: {network}")


class UnknownSupplierError(SupplierError):
    """Supplier name is not part of the SupplierName enum."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown supplier: {name}")
