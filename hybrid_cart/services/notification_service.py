# hybrid_cart/services/notification_service.py
from typing import List

from hybrid_cart.celery_worker import celery_app
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)


def order_summary(order_id: int, total_amount: str, items: List[dict]) -> str:
    units = sum(i["quantity"] for i in items)
    return f"Order {order_id}: {units} item(s) in {len(items)} line(s), total {total_amount}"


class NotificationService:
    """Potwierdzenie zamowienia po commicie checkoutu, wysylka w tle przez Celery."""

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, total_amount: str, items: List[dict]):
        #argumenty taska musza byc json-owalne - total jako string, nie Decimal
        send_order_confirmation_task.delay(user_id, order_id, total_amount, items)


@celery_app.task(name="hybrid_cart.services.notification_service.send_order_confirmation_task")
def send_order_confirmation_task(user_id: int, order_id: int, total_amount: str, items: List[dict]):
    summary = order_summary(order_id, total_amount, items)
    logger.info(f"[ORDER CONFIRMATION] User {user_id}: {summary}")

    return {
        "user_id": user_id,
        "order_id": order_id,
        "total_amount": total_amount,
        "summary": summary,
    }
