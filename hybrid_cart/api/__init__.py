# hybrid_cart/api/__init__.py
