# Signal to publish order changes once status updates are committed
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from .events import OrderChangeEvent, publish
from .models import OrderStatusUpdate


@receiver(post_save, sender=OrderStatusUpdate)
def publish_order_change(sender, instance, created, **kwargs):
    """Announce each new status update after its transaction commits"""
    if not created:
        return
    event = OrderChangeEvent.from_update(instance)
    transaction.on_commit(lambda: publish(event))
