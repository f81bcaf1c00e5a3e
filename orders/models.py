from decimal import Decimal
import uuid

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from authentication.models import TimeStampedModel
from inventory.models import MenuItem


class OrderStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    PREPARING = 'preparing', 'Preparing'
    READY = 'ready', 'Ready'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class PaymentMethod(models.TextChoices):
    CASH = 'cash', 'Cash'
    CARD = 'card', 'Card'
    ONLINE = 'online', 'Online'


class AppendOnlyModel(models.Model):
    """Rows are written once; later saves and deletes are refused."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError(f"{self._meta.verbose_name} records cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError(f"{self._meta.verbose_name} records cannot be deleted")


class Order(TimeStampedModel):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    token = models.PositiveIntegerField(default=0)
    # Local calendar day the token belongs to
    token_date = models.DateField(default=timezone.localdate, editable=False)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='orders'
    )
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='orders_status_created_idx'),
        ]
        constraints = [
            models.UniqueConstraint(fields=['token_date', 'token'], name='orders_unique_daily_token'),
        ]

    @classmethod
    def next_token(cls, day):
        """Pickup tokens restart at 1 every day"""
        last_token = cls.objects.filter(token_date=day).aggregate(
            max_token=models.Max('token')
        )['max_token'] or 0
        return last_token + 1

    def save(self, *args, **kwargs):
        if self._state.adding and not self.token:
            self.token = self.next_token(self.token_date)

        super().save(*args, **kwargs)

    def calculate_total(self):
        """Sum of the line items' snapshotted price times quantity"""
        return sum(
            (item.line_total for item in self.items.all()),
            Decimal('0.00'),
        )

    @property
    def display_number(self):
        return f"Order #{str(self.id)[:8]}"

    def __str__(self):
        return f"{self.display_number} - Token: {self.token} - {self.status}"


class OrderItem(AppendOnlyModel):
    order = models.ForeignKey(Order, related_name='items', on_delete=models.CASCADE)
    menu_item = models.ForeignKey(MenuItem, on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    # Unit price at the moment the order was placed
    price = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = 'order_items'
        ordering = ['id']

    @property
    def line_total(self):
        return self.price * self.quantity

    def __str__(self):
        return f"{self.quantity} x {self.menu_item.name}"


class OrderStatusUpdate(AppendOnlyModel):
    """Audit trail of every status an order has been in."""
    order = models.ForeignKey(Order, related_name='status_updates', on_delete=models.CASCADE)
    status = models.CharField(max_length=20, choices=OrderStatus.choices)
    message = models.TextField(blank=True)
    # Null for the record written when the customer places the order
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='status_updates'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_status_updates'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.order.display_number} -> {self.status}"
