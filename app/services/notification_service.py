# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_placed(buyer_id: int, order_id: int, order_number: str):
        """
        Powiadomienie o zlozeniu zamowienia. Wywolywane po commicie,
        wiec blad kolejki nie moze cofnac zamowienia.
        """
        try:
            send_order_placed_task.delay(buyer_id, order_id, order_number)
        except Exception as e:
            logger.warning(f"Failed to dispatch notification for order {order_id}: {e}")
            return False
        return True

    @staticmethod
    def send_order_status_changed(user_id: int, order_id: int, status: str):
        try:
            send_order_status_task.delay(user_id, order_id, status)
        except Exception as e:
            logger.warning(f"Failed to dispatch status notification for order {order_id}: {e}")
            return False
        return True


@celery_app.task(name="app.services.notification_service.send_order_placed_task")
def send_order_placed_task(buyer_id: int, order_id: int, order_number: str):
    """
    Celery task - w prawdziwym systemie wysłałby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {buyer_id}: Order {order_number} ({order_id}) placed")
    return {"user_id": buyer_id, "order_id": order_id, "status": "sent"}


@celery_app.task(name="app.services.notification_service.send_order_status_task")
def send_order_status_task(user_id: int, order_id: int, status: str):
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} is now {status}")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}
