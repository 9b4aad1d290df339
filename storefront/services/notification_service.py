# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications, processed asynchronously by Celery.
    Queueing failures are logged; the order is already committed by then.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, total) -> bool:
        try:
            send_order_notification_task.delay(user_id, order_id, str(total))
            return True
        except Exception as e:
            logger.error(f"Could not queue notification for order {order_id}: {e}")
            return False


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, total: str):
    """
    Celery task. Email delivery is handled outside this service; the task
    records that the confirmation is due.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} placed, total {total}")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
