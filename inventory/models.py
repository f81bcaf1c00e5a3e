from decimal import Decimal
import uuid

from django.core.validators import MinValueValidator
from django.db import models

from authentication.models import TimeStampedModel


class MenuItem(TimeStampedModel):
    """A dish on the canteen menu. Maintained through the admin site."""

    class Category(models.TextChoices):
        VEG = 'veg', 'Veg'
        NON_VEG = 'non_veg', 'Non-Veg'
        MEALS = 'meals', 'Meals'
        STARTERS = 'starters', 'Starters'
        BEVERAGES = 'beverages', 'Beverages'
        SNACKS = 'snacks', 'Snacks'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=Category.choices)
    price = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
    )
    image_url = models.URLField(blank=True)
    is_available = models.BooleanField(default=True)

    class Meta:
        db_table = 'menu_items'
        ordering = ['category', 'name']

    def __str__(self):
        return f"{self.name} ({self.get_category_display()})"
