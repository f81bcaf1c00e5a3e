from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.models import Profile
from authentication.serializers import tokens_for
from orders.models import Order, OrderStatus, OrderStatusUpdate
from .helpers import make_item, make_profile


class CartApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.customer = make_profile('asha@campus.edu')
        self.client.force_authenticate(self.customer)
        self.thali = make_item('Veg Thali', '120.00')
        self.lassi = make_item('Sweet Lassi', '45.50', category='beverages')

    def add(self, item):
        return self.client.post(reverse('orders:cart'), {'menu_item_id': str(item.id)}, format='json')

    def test_add_and_total(self):
        self.add(self.thali)
        self.add(self.thali)
        response = self.add(self.lassi)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['item_count'], 2)
        self.assertEqual(response.data['total'], '285.50')
        self.assertEqual(response.data['total_display'], '₹285.50')

        response = self.client.get(reverse('orders:cart'))
        quantities = {line['name']: line['quantity'] for line in response.data['items']}
        self.assertEqual(quantities, {'Veg Thali': 2, 'Sweet Lassi': 1})

    def test_decrement_removes_line(self):
        self.add(self.thali)
        response = self.client.patch(
            reverse('orders:cart-line', args=[self.thali.id]), {'delta': -1}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['items'], [])

    def test_zero_delta_is_rejected(self):
        self.add(self.thali)
        response = self.client.patch(
            reverse('orders:cart-line', args=[self.thali.id]), {'delta': 0}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_line_not_in_cart(self):
        response = self.client.patch(
            reverse('orders:cart-line', args=[self.lassi.id]), {'delta': 1}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_remove_line_and_clear(self):
        self.add(self.thali)
        self.add(self.lassi)

        response = self.client.delete(reverse('orders:cart-line', args=[self.thali.id]))
        self.assertEqual(response.data['item_count'], 1)

        response = self.client.delete(reverse('orders:cart'))
        self.assertEqual(response.data['item_count'], 0)
        self.assertEqual(response.data['total'], '0.00')

    def test_unavailable_item_cannot_be_added(self):
        self.thali.is_available = False
        self.thali.save()

        response = self.add(self.thali)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cart_does_not_follow_the_session_to_another_customer(self):
        ravi = make_profile('ravi@campus.edu')
        self.client.force_authenticate(None)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens_for(self.customer)['access']}")
        self.add(self.thali)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens_for(ravi)['access']}")
        response = self.client.get(reverse('orders:cart'))
        self.assertEqual(response.data['items'], [])

        response = self.client.post(reverse('orders:order-place'), {'payment_method': 'cash'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Order.objects.exists())

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens_for(self.customer)['access']}")
        response = self.client.get(reverse('orders:cart'))
        self.assertEqual(response.data['item_count'], 1)

    def test_employees_have_no_cart(self):
        self.client.force_authenticate(make_profile('counter@campus.edu', role=Profile.Role.EMPLOYEE))
        response = self.client.get(reverse('orders:cart'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PlaceOrderApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.customer = make_profile('asha@campus.edu')
        self.client.force_authenticate(self.customer)
        self.item_a = make_item('Paneer Meals', '100.00')
        self.item_b = make_item('Filter Coffee', '50.00', category='beverages')

    def test_checkout_from_session_cart(self):
        for item in (self.item_a, self.item_a, self.item_b):
            self.client.post(reverse('orders:cart'), {'menu_item_id': str(item.id)}, format='json')

        response = self.client.post(reverse('orders:order-place'), {'payment_method': 'cash'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '250.00')
        self.assertEqual(response.data['status'], 'pending')
        self.assertEqual(len(response.data['items']), 2)
        self.assertEqual(len(response.data['status_updates']), 1)
        self.assertEqual(response.data['status_updates'][0]['message'], 'Order placed successfully')

        cart = self.client.get(reverse('orders:cart'))
        self.assertEqual(cart.data['item_count'], 0)

    def test_checkout_with_items_payload(self):
        response = self.client.post(reverse('orders:order-place'), {
            'payment_method': 'online',
            'items': [
                {'menu_item_id': str(self.item_a.id), 'quantity': 2},
                {'menu_item_id': str(self.item_b.id), 'quantity': 1},
            ],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['total_amount'], '250.00')
        self.assertEqual(response.data['payment_method'], 'online')

    def test_duplicate_items_in_payload(self):
        response = self.client.post(reverse('orders:order-place'), {
            'items': [
                {'menu_item_id': str(self.item_a.id), 'quantity': 1},
                {'menu_item_id': str(self.item_a.id), 'quantity': 1},
            ],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_empty_cart(self):
        response = self.client.post(reverse('orders:order-place'), {'payment_method': 'cash'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Order.objects.exists())
        self.assertFalse(OrderStatusUpdate.objects.exists())

    def test_unknown_payment_method(self):
        self.client.post(reverse('orders:cart'), {'menu_item_id': str(self.item_a.id)}, format='json')
        response = self.client.post(reverse('orders:order-place'), {'payment_method': 'cheque'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class OrderApiTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.asha = make_profile('asha@campus.edu')
        self.ravi = make_profile('ravi@campus.edu')
        self.employee = make_profile('counter@campus.edu', role=Profile.Role.EMPLOYEE)
        self.item = make_item('Veg Thali', '120.00')
        self.order = self.place(self.asha)

    def place(self, customer):
        self.client.force_authenticate(customer)
        response = self.client.post(reverse('orders:order-place'), {
            'items': [{'menu_item_id': str(self.item.id), 'quantity': 1}],
        }, format='json')
        return Order.objects.get(pk=response.data['id'])

    def act(self, order, **payload):
        self.client.force_authenticate(self.employee)
        return self.client.post(reverse('orders:order-transition', args=[order.id]), payload, format='json')

    def test_my_orders_are_scoped(self):
        self.place(self.ravi)
        self.client.force_authenticate(self.asha)

        response = self.client.get(reverse('orders:my-orders'))

        self.assertEqual([o['id'] for o in response.data], [str(self.order.id)])

    def test_my_orders_show_three_latest_updates(self):
        for action in ('accept', 'start_preparing', 'mark_ready'):
            self.act(self.order, action=action)
        self.client.force_authenticate(self.asha)

        response = self.client.get(reverse('orders:my-orders'))

        updates = response.data[0]['recent_updates']
        self.assertEqual([u['status'] for u in updates], ['ready', 'preparing', 'accepted'])

    def test_employee_accepts(self):
        response = self.act(self.order, action='accept')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'accepted')
        self.assertEqual(len(response.data['status_updates']), 2)
        self.assertEqual(response.data['status_updates'][-1]['updated_by_name'], self.employee.name)

    def test_transition_by_status(self):
        response = self.act(self.order, status='cancelled', message='Out of rice')

        self.assertEqual(response.data['status'], 'cancelled')
        self.assertEqual(response.data['status_updates'][-1]['message'], 'Out of rice')

    def test_illegal_transition_conflicts(self):
        response = self.act(self.order, status='preparing')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PENDING)

    def test_status_and_action_together(self):
        response = self.act(self.order, status='accepted', action='accept')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_customer_cannot_transition(self):
        self.client.force_authenticate(self.asha)
        response = self.client.post(
            reverse('orders:order-transition', args=[self.order.id]), {'action': 'accept'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_active_queue(self):
        done = self.place(self.ravi)
        for action in ('accept', 'start_preparing', 'mark_ready', 'complete'):
            self.act(done, action=action)

        response = self.client.get(reverse('orders:active-orders'))

        self.assertEqual([o['id'] for o in response.data], [str(self.order.id)])
        actions = {a['action'] for a in response.data[0]['available_actions']}
        self.assertEqual(actions, {'accept', 'decline'})

    def test_active_queue_is_staff_only(self):
        self.client.force_authenticate(self.asha)
        response = self.client.get(reverse('orders:active-orders'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_detail_visibility(self):
        url = reverse('orders:order-detail', args=[self.order.id])

        self.client.force_authenticate(self.ravi)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.asha)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)

        self.client.force_authenticate(self.employee)
        self.assertEqual(self.client.get(url).status_code, status.HTTP_200_OK)


class OrderFeedTests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.asha = make_profile('asha@campus.edu')
        self.ravi = make_profile('ravi@campus.edu')
        self.employee = make_profile('counter@campus.edu', role=Profile.Role.EMPLOYEE)
        item = make_item('Veg Thali', '120.00')
        for customer in (self.asha, self.ravi):
            self.client.force_authenticate(customer)
            self.client.post(reverse('orders:order-place'), {
                'items': [{'menu_item_id': str(item.id), 'quantity': 1}],
            }, format='json')
        self.asha_order = Order.objects.get(customer=self.asha)

    def test_customer_feed_is_scoped(self):
        self.client.force_authenticate(self.asha)
        response = self.client.get(reverse('orders:order-feed'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e['order_id'] for e in response.data['events']], [str(self.asha_order.id)])

    def test_feed_resumes_from_cursor(self):
        self.client.force_authenticate(self.employee)
        first = self.client.get(reverse('orders:order-feed'))
        self.assertEqual(len(first.data['events']), 2)

        self.client.post(
            reverse('orders:order-transition', args=[self.asha_order.id]), {'action': 'accept'}, format='json'
        )
        response = self.client.get(reverse('orders:order-feed'), {'after': first.data['cursor']})

        self.assertEqual([e['status'] for e in response.data['events']], ['accepted'])
        self.assertGreater(response.data['cursor'], first.data['cursor'])

    def test_bad_cursor(self):
        self.client.force_authenticate(self.employee)
        response = self.client.get(reverse('orders:order-feed'), {'after': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
