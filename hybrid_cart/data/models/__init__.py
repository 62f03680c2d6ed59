#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from hybrid_cart.data.models.product import ProductModel
from hybrid_cart.data.models.cart import CartLineModel
from hybrid_cart.data.models.order import OrderModel

__all__ = ["ProductModel", "CartLineModel", "OrderModel"]
