# hybrid_cart/client/local_store.py
import json
from pathlib import Path
from typing import Dict

from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)


class LocalCartStore:
    """Koszyk na dysku klienta, przezywa restart ({product_id: quantity})."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def load(self) -> Dict[int, int]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return {int(k): int(v) for k, v in raw.items() if int(v) > 0}
        except (ValueError, AttributeError, OSError) as e:
            logger.error(f"Error loading cart from {self.path}: {e}")
            return {}

    def save(self, cart: Dict[int, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({str(k): v for k, v in cart.items()}), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
