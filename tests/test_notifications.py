from hybrid_cart.celery_worker import celery_app
from hybrid_cart.services.notification_service import (
    NotificationService,
    order_summary,
    send_order_confirmation_task,
)

ITEMS = [{"product_id": 1, "quantity": 2}, {"product_id": 4, "quantity": 1}]


class TestOrderConfirmation:
    def test_summary_counts_units_and_lines(self):
        assert order_summary(17, "225.97", ITEMS) == "Order 17: 3 item(s) in 2 line(s), total 225.97"

    def test_task_returns_summary(self):
        result = send_order_confirmation_task(3, 17, "225.97", ITEMS)

        assert result == {
            "user_id": 3,
            "order_id": 17,
            "total_amount": "225.97",
            "summary": "Order 17: 3 item(s) in 2 line(s), total 225.97",
        }

    def test_service_runs_task_eagerly_in_tests(self):
        assert celery_app.conf.task_always_eager is True

        # bez brokera - task wykonuje sie w procesie
        NotificationService.send_order_notification(3, 17, "225.97", ITEMS)

    def test_task_registered(self):
        assert "hybrid_cart.services.notification_service.send_order_confirmation_task" in celery_app.tasks
