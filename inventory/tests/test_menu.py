from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.models import Profile
from inventory.models import MenuItem


class MenuTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(
            Profile.objects.create_user('asha@campus.edu', 'Canteen-Pass-2024!', name='Asha')
        )
        self.dosa = MenuItem.objects.create(
            name='Masala Dosa', category=MenuItem.Category.VEG, price=Decimal('60.00')
        )
        self.biryani = MenuItem.objects.create(
            name='Chicken Biryani', category=MenuItem.Category.NON_VEG, price=Decimal('120.00')
        )
        self.soup = MenuItem.objects.create(
            name='Tomato Soup', category=MenuItem.Category.STARTERS, price=Decimal('45.50'),
            is_available=False,
        )

    def names(self, response):
        return [item['name'] for item in response.data]

    def test_only_available_items_are_listed(self):
        response = self.client.get(reverse('menu-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertCountEqual(self.names(response), ['Masala Dosa', 'Chicken Biryani'])

    def test_category_filter(self):
        response = self.client.get(reverse('menu-list'), {'category': 'non_veg'})

        self.assertEqual(self.names(response), ['Chicken Biryani'])
        self.assertEqual(response.data[0]['price_display'], '₹120.00')

    def test_all_category_returns_everything_available(self):
        response = self.client.get(reverse('menu-list'), {'category': 'all'})

        self.assertEqual(len(response.data), 2)

    def test_unavailable_category_is_empty(self):
        response = self.client.get(reverse('menu-list'), {'category': 'starters'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])

    def test_unknown_category_is_rejected(self):
        response = self.client.get(reverse('menu-list'), {'category': 'desserts'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_categories_lead_with_all(self):
        response = self.client.get(reverse('menu-categories'))

        values = [c['value'] for c in response.data]
        self.assertEqual(values[0], 'all')
        self.assertEqual(values[1:], list(MenuItem.Category.values))

    def test_detail(self):
        response = self.client.get(reverse('menu-detail', args=[self.soup.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_available'])

    def test_menu_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.get(reverse('menu-list'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
