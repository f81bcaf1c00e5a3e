from decimal import Decimal
from io import BytesIO
from types import SimpleNamespace

import openpyxl
from django.test import SimpleTestCase, TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.models import Profile
from dashboard.reports import summarize_orders
from orders.cart import Cart
from orders.lifecycle import perform_action, place_order
from orders.tests.helpers import make_item, make_profile


def order(status, total, payment_method='cash'):
    return SimpleNamespace(status=status, total_amount=Decimal(total), payment_method=payment_method)


class SummarizeOrdersTests(SimpleTestCase):

    def test_no_orders(self):
        summary = summarize_orders([])
        self.assertEqual(summary.total_revenue, Decimal('0.00'))
        self.assertEqual(summary.average_order_value, Decimal('0'))
        self.assertEqual(summary.cancellation_rate, 0)
        self.assertEqual(summary.payment_methods, {})

    def test_only_cancelled_orders(self):
        summary = summarize_orders([order('cancelled', '80.00')])
        self.assertEqual(summary.average_order_value, Decimal('0'))
        self.assertEqual(summary.cancellation_rate, 100.0)

    def test_mixed_orders(self):
        summary = summarize_orders([
            order('completed', '120.00', 'cash'),
            order('completed', '45.50', 'card'),
            order('completed', '100.00', 'cash'),
            order('cancelled', '60.00', 'online'),
            order('pending', '30.00', 'cash'),
            order('preparing', '30.00', 'card'),
        ])

        self.assertEqual(len(summary.completed), 3)
        self.assertEqual(len(summary.cancelled), 1)
        self.assertEqual(summary.total_orders, 6)
        self.assertEqual(summary.total_revenue, Decimal('265.50'))
        self.assertEqual(summary.average_order_value, Decimal('88.50'))
        self.assertEqual(summary.payment_methods, {'cash': 2, 'card': 1})
        self.assertEqual(summary.cancellation_rate, 16.7)


class SalesDashboardApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = make_profile('admin@campus.edu', role=Profile.Role.ADMIN)
        employee = make_profile('counter@campus.edu', role=Profile.Role.EMPLOYEE)
        customer = make_profile('asha@campus.edu', name='Asha', mobile='+919876543210')
        item = make_item('Veg Thali', '120.00')

        cart = Cart()
        cart.add(item)
        completed = place_order(customer, cart, 'card')
        for action in ('accept', 'start_preparing', 'mark_ready', 'complete'):
            perform_action(completed.id, action, employee)
        declined = place_order(customer, cart, 'cash')
        perform_action(declined.id, 'decline', employee)

        self.client.force_authenticate(self.admin)

    def test_analytics(self):
        response = self.client.get(reverse('dashboard:sales-analytics'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total_orders'], 2)
        self.assertEqual(response.data['total_revenue'], '120.00')
        self.assertEqual(response.data['average_order_value'], '120.00')
        self.assertEqual(response.data['payment_methods'], {'card': 1})
        self.assertEqual(response.data['cancellation_rate'], 50.0)
        self.assertEqual(response.data['completed'][0]['customer_name'], 'Asha')
        self.assertEqual(response.data['completed'][0]['customer_mobile'], '+919876543210')
        self.assertEqual(len(response.data['cancelled']), 1)

    def test_date_range_outside_orders(self):
        response = self.client.get(reverse('dashboard:sales-analytics'), {
            'start_date': '2001-01-01', 'end_date': '2001-01-31',
        })
        self.assertEqual(response.data['total_orders'], 0)
        self.assertEqual(response.data['average_order_value'], '0.00')

    def test_bad_date(self):
        response = self.client.get(reverse('dashboard:sales-analytics'), {'start_date': '31/01/2001'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_only(self):
        self.client.force_authenticate(make_profile('ravi@campus.edu'))
        response = self.client.get(reverse('dashboard:sales-analytics'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_excel_export(self):
        response = self.client.get(reverse('dashboard:export-report'), {'format': 'excel'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('.xlsx', response['Content-Disposition'])
        workbook = openpyxl.load_workbook(BytesIO(response.content))
        self.assertEqual(workbook.sheetnames, ['Summary', 'Completed Orders'])
        rows = list(workbook['Completed Orders'].values)
        self.assertEqual(rows[0][0], 'Date')
        self.assertEqual(rows[1][4], '+919876543210')
        self.assertEqual(len(rows), 2)

    def test_pdf_export(self):
        response = self.client.get(reverse('dashboard:export-report'), {'format': 'pdf'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_unknown_export_format(self):
        response = self.client.get(reverse('dashboard:export-report'), {'format': 'csv'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
