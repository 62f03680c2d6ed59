# hybrid_cart/services/cart_service.py
from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hybrid_cart.domain.errors import StoreError
from hybrid_cart.domain.schemas import ItemIn
from hybrid_cart.repos.cart_repo import CartRepo
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Serwerowa kopia koszyka.
    sync - komenda, nadpisuje caly koszyk usera (delete + insert)
    get - query, tylko odczyt

    Sync nie sprawdza stanu ani istnienia produktow, to lustro stanu klienta.
    Walidacja dopiero przy checkoucie.
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        lines = self.repo.get_lines(user_id)
        return {
            "user_id": user_id,
            "items": [
                {"product_id": line.product_id, "quantity": line.quantity}
                for line in lines
            ],
        }

    #commands
    def sync_cart(self, user_id: int, items: List[ItemIn]) -> None:
        try:
            removed = self.repo.clear(user_id)
            if items:
                self.repo.add_lines(user_id, items)
            self.repo.commit()
        except SQLAlchemyError as e:
            self.repo.rollback()
            logger.error(f"Error syncing cart for user {user_id}: {e}")
            raise StoreError("Failed to sync cart") from e

        logger.info(f"Cart synced for user {user_id}: {len(items)} items (replaced {removed})")
