# hybrid_cart/services/checkout_service.py
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List

from redis.exceptions import RedisError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hybrid_cart.data.models.order import OrderModel
from hybrid_cart.domain.errors import ShopError, ValidationError, NotFound, InsufficientStock, StoreError
from hybrid_cart.domain.schemas import ItemIn
from hybrid_cart.repos.cart_repo import CartRepo
from hybrid_cart.repos.order_repo import OrderRepo
from hybrid_cart.repos.product_repo import ProductRepo
from hybrid_cart.services.cache import ProductCache, ALL_PRODUCTS_KEY, product_key
from hybrid_cart.services.notification_service import NotificationService
from hybrid_cart.services.product_service import ProductService
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutState(str, Enum):
    VALIDATING = "VALIDATING"
    MUTATING = "MUTATING"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"


@dataclass
class CheckoutResult:
    state: CheckoutState
    order_id: int | None = None
    total_amount: Decimal | None = None
    error: ShopError | None = None

    @property
    def ok(self) -> bool:
        return self.state is CheckoutState.COMMITTED


@dataclass
class _CheckoutContext:
    user_id: int
    items: List[ItemIn]
    state: CheckoutState = CheckoutState.VALIDATING
    products: Dict[int, Dict[str, Any]] = field(default_factory=dict)
    total: Decimal = Decimal("0.00")
    order: OrderModel | None = None


Step = Callable[[_CheckoutContext], ShopError | None]


class CheckoutService:
    """
    Checkout jako jawna sekwencja krokow w jednej transakcji:
    walidacja -> zmniejszenie stanow -> zamowienie -> czyszczenie koszyka -> commit

    Kazdy krok zwraca None albo blad domeny. Pierwszy blad = rollback.
    Wyjatki bazy sa lapane na granicy kroku i zamieniane na StoreError.
    Invalidacje cache nie sa cofane przy rollbacku - wpis tylko znika,
    nastepny odczyt idzie do bazy. Po commicie klucze sa usuwane jeszcze raz,
    bo rownolegly odczyt mogl w miedzyczasie wpisac do cache stan sprzed commitu.
    """

    def __init__(self, db: Session, cache: ProductCache, notifier: NotificationService | None = None):
        self.db = db
        self.cache = cache
        self.products = ProductService(db, cache)
        self.product_repo = ProductRepo(db)
        self.cart_repo = CartRepo(db)
        self.order_repo = OrderRepo(db)
        self.notifier = notifier or NotificationService()

    def checkout(self, user_id: int, items: List[ItemIn]) -> CheckoutResult:
        ctx = _CheckoutContext(user_id=user_id, items=list(items))

        steps: List[tuple[CheckoutState, Step]] = [
            (CheckoutState.VALIDATING, self._check_request),
            (CheckoutState.VALIDATING, self._resolve_products),
            (CheckoutState.VALIDATING, self._validate_stock),
            (CheckoutState.MUTATING, self._decrement_stock),
            (CheckoutState.MUTATING, self._create_order),
            (CheckoutState.MUTATING, self._clear_cart),
            (CheckoutState.MUTATING, self._invalidate_catalog),
            (CheckoutState.MUTATING, self._commit),
        ]

        for state, step in steps:
            ctx.state = state
            error = self._run_step(step, ctx)
            if error is not None:
                return self._roll_back(ctx, error)

        ctx.state = CheckoutState.COMMITTED
        order_id = ctx.order.id
        logger.info(f"Order created: ID {order_id}, User {user_id}, total {ctx.total}")

        self._invalidate_after_commit(ctx)
        self._notify(ctx)

        return CheckoutResult(
            state=ctx.state,
            order_id=order_id,
            total_amount=ctx.total,
        )

    def _run_step(self, step: Step, ctx: _CheckoutContext) -> ShopError | None:
        try:
            return step(ctx)
        except SQLAlchemyError as e:
            reason = str(getattr(e, "orig", None) or e)
            logger.error(f"Store failure in {step.__name__} for user {ctx.user_id}: {reason}")
            return StoreError(reason)
        except RedisError as e:
            logger.error(f"Cache failure in {step.__name__} for user {ctx.user_id}: {e}")
            return StoreError(f"Cache unavailable: {e}")

    def _roll_back(self, ctx: _CheckoutContext, error: ShopError) -> CheckoutResult:
        logger.warning(
            f"Checkout for user {ctx.user_id} rolled back during {ctx.state.value}: {error.message}"
        )
        self.db.rollback()
        return CheckoutResult(state=CheckoutState.ROLLED_BACK, error=error)

    # =====================================================
    # STEPS
    # =====================================================
    def _check_request(self, ctx: _CheckoutContext) -> ShopError | None:
        if not ctx.items:
            return ValidationError("Invalid checkout data")
        return None

    def _resolve_products(self, ctx: _CheckoutContext) -> ShopError | None:
        for item in ctx.items:
            product = self.products.find_product(item.product_id)
            if product is None:
                return NotFound(f"Product {item.product_id} not found")
            ctx.products[item.product_id] = product
        return None

    def _validate_stock(self, ctx: _CheckoutContext) -> ShopError | None:
        for item in ctx.items:
            product = ctx.products[item.product_id]
            if product["stock"] < item.quantity:
                return InsufficientStock(
                    f"Insufficient stock for {product['name']}. "
                    f"Available: {product['stock']}, Requested: {item.quantity}"
                )
        ctx.total = sum(
            (Decimal(str(ctx.products[i.product_id]["price"])) * i.quantity for i in ctx.items),
            Decimal("0.00"),
        )
        return None

    def _decrement_stock(self, ctx: _CheckoutContext) -> ShopError | None:
        for item in ctx.items:
            rowcount = self.product_repo.decrement_stock(item.product_id, item.quantity)
            self.cache.delete(product_key(item.product_id))

            #walidacja byla na odczycie z cache, stan mogl sie zmienic w miedzyczasie
            if rowcount == 0:
                product = ctx.products[item.product_id]
                return InsufficientStock(
                    f"Insufficient stock for {product['name']}. Requested: {item.quantity}"
                )
        return None

    def _create_order(self, ctx: _CheckoutContext) -> ShopError | None:
        ctx.order = self.order_repo.create_order(
            OrderModel(
                user_id=ctx.user_id,
                items=[{"product_id": i.product_id, "quantity": i.quantity} for i in ctx.items],
                total_amount=ctx.total,
            )
        )
        return None

    def _clear_cart(self, ctx: _CheckoutContext) -> ShopError | None:
        self.cart_repo.clear(ctx.user_id)
        return None

    def _invalidate_catalog(self, ctx: _CheckoutContext) -> ShopError | None:
        self.cache.delete(ALL_PRODUCTS_KEY)
        return None

    def _commit(self, ctx: _CheckoutContext) -> ShopError | None:
        self.db.commit()
        return None

    def _invalidate_after_commit(self, ctx: _CheckoutContext):
        keys = [product_key(pid) for pid in ctx.products] + [ALL_PRODUCTS_KEY]
        try:
            for key in keys:
                self.cache.delete(key)
        except RedisError as e:
            #commit juz byl, wpis wygasnie po TTL
            logger.warning(f"Post-commit cache invalidation failed for order {ctx.order.id}: {e}")

    def _notify(self, ctx: _CheckoutContext):
        #zamowienie juz zacommitowane, blad brokera nie moze go cofnac
        order = ctx.order
        try:
            self.notifier.send_order_notification(
                user_id=ctx.user_id,
                order_id=order.id,
                total_amount=str(ctx.total),
                items=order.items,
            )
        except Exception as e:
            logger.warning(f"Failed to queue notification for order {order.id}: {e}")
