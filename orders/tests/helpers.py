from decimal import Decimal

from authentication.models import Profile
from inventory.models import MenuItem

PASSWORD = "Canteen-Pass-2024!"


def make_profile(email, role=Profile.Role.CUSTOMER, name=None, mobile=''):
    return Profile.objects.create_user(
        email, PASSWORD, name=name or email.split('@')[0], role=role, mobile=mobile
    )


def make_item(name, price, category=MenuItem.Category.MEALS, available=True):
    return MenuItem.objects.create(
        name=name, category=category, price=Decimal(price), is_available=available
    )
