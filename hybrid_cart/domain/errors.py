# hybrid_cart/domain/errors.py


class ShopError(Exception):
    """Bazowy wyjatek domeny sklepu, message idzie prosto do klienta."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ShopError):
    """Niepoprawne body requestu (brak user_id, items nie jest lista...)."""


class NotFound(ShopError):
    """Produkt nie istnieje."""


class InsufficientStock(ShopError):
    """Zamowiona ilosc wieksza niz stan magazynu."""


class StoreError(ShopError):
    """Blad bazy danych - polaczenie albo transakcja."""


class CacheMiss(ShopError):
    """Brak wpisu w cache - tylko wewnetrznie, nigdy nie trafia do klienta."""
