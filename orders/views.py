import logging

from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.views import APIView
from django.conf import settings
from django.db.models import Prefetch
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from authentication.permissions import IsCustomer, IsEmployee, IsOrderOwnerOrStaff, IsStaffMember
from inventory.models import MenuItem
from .cart import Cart, CartLine
from .events import OrderChangeEvent
from .lifecycle import ACTIVE_STATUSES, perform_action, place_order, transition_order
from .models import Order, OrderItem, OrderStatusUpdate
from .serializers import (
    ActiveOrderSerializer, CartAddSerializer, CartQuantitySerializer, CustomerOrderSerializer,
    OrderChangeEventSerializer, OrderDetailSerializer, PlaceOrderSerializer, TransitionSerializer,
    cart_data,
)

logger = logging.getLogger(__name__)


def order_queryset():
    return Order.objects.select_related('customer').prefetch_related(
        Prefetch('items', queryset=OrderItem.objects.select_related('menu_item')),
        'status_updates__updated_by',
    )


# =============== CART ===============

class CartView(APIView):
    """
    get: The session cart
    post: Add one unit of a menu item
    delete: Empty the cart
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    def get(self, request):
        return Response(cart_data(Cart.from_session(request.session, request.user)))

    @extend_schema(request=CartAddSerializer)
    def post(self, request):
        serializer = CartAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = Cart.from_session(request.session, request.user)
        cart.add(serializer.menu_item)
        cart.save(request.session, request.user)
        return Response(cart_data(cart), status=status.HTTP_200_OK)

    def delete(self, request):
        cart = Cart.from_session(request.session, request.user)
        cart.clear()
        cart.save(request.session, request.user)
        return Response(cart_data(cart))


class CartLineView(APIView):
    """
    patch: Change a line's quantity by ``delta``; the line goes away at zero
    delete: Remove a line
    """
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(request=CartQuantitySerializer)
    def patch(self, request, item_id):
        serializer = CartQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        cart = Cart.from_session(request.session, request.user)
        if item_id not in cart:
            raise NotFound('Item is not in the cart')
        cart.change_quantity(item_id, serializer.validated_data['delta'])
        cart.save(request.session, request.user)
        return Response(cart_data(cart))

    def delete(self, request, item_id):
        cart = Cart.from_session(request.session, request.user)
        if item_id not in cart:
            raise NotFound('Item is not in the cart')
        cart.remove(item_id)
        cart.save(request.session, request.user)
        return Response(cart_data(cart))


# =============== ORDERS (CUSTOMER) ===============

class PlaceOrderView(APIView):
    """Place an order from the session cart, or from ``items`` when given"""
    permission_classes = [IsAuthenticated, IsCustomer]

    @extend_schema(request=PlaceOrderSerializer, responses={201: OrderDetailSerializer})
    def post(self, request):
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        items = serializer.validated_data.get('items')

        if items is not None:
            cart = self._cart_from_items(items)
        else:
            cart = Cart.from_session(request.session, request.user)

        order = place_order(request.user, cart, serializer.validated_data['payment_method'])

        if items is None:
            cart.clear()
            cart.save(request.session, request.user)

        order = order_queryset().get(pk=order.pk)
        return Response(OrderDetailSerializer(order).data, status=status.HTTP_201_CREATED)

    def _cart_from_items(self, items):
        menu = MenuItem.objects.in_bulk([row['menu_item_id'] for row in items])
        lines = []
        for row in items:
            menu_item = menu.get(row['menu_item_id'])
            if menu_item is None:
                raise NotFound(f"Menu item {row['menu_item_id']} not found")
            lines.append(CartLine(menu_item.id, menu_item.name, menu_item.price, row['quantity']))
        return Cart(lines)


class MyOrderListView(generics.ListAPIView):
    """The signed-in customer's orders, newest first"""
    serializer_class = CustomerOrderSerializer
    permission_classes = [IsAuthenticated, IsCustomer]
    pagination_class = None

    def get_queryset(self):
        return order_queryset().filter(customer=self.request.user).order_by('-created_at')


class OrderDetailView(generics.RetrieveAPIView):
    """One order with its full status history"""
    serializer_class = OrderDetailSerializer
    permission_classes = [IsAuthenticated, IsOrderOwnerOrStaff]

    def get_queryset(self):
        return order_queryset()


# =============== ORDERS (EMPLOYEE) ===============

class ActiveOrderListView(generics.ListAPIView):
    """Orders still moving through the kitchen, with the actions each allows"""
    serializer_class = ActiveOrderSerializer
    permission_classes = [IsAuthenticated, IsStaffMember]
    pagination_class = None

    def get_queryset(self):
        return order_queryset().filter(status__in=ACTIVE_STATUSES).order_by('-created_at')


@extend_schema(request=TransitionSerializer, responses={200: OrderDetailSerializer})
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsEmployee])
def transition(request, pk):
    """Move an order along by target ``status`` or by ``action`` name"""
    serializer = TransitionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    get_object_or_404(Order, pk=pk)
    if 'action' in data:
        order, _ = perform_action(pk, data['action'], request.user, data.get('message'))
    else:
        order, _ = transition_order(pk, data['status'], request.user, data.get('message'))

    order = order_queryset().get(pk=order.pk)
    return Response(OrderDetailSerializer(order).data)


# =============== CHANGE FEED ===============

@extend_schema(
    parameters=[
        OpenApiParameter('after', OpenApiTypes.INT, OpenApiParameter.QUERY,
                         description="Return changes with update_id greater than this"),
    ],
    responses={200: OrderChangeEventSerializer(many=True)},
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def order_feed(request):
    """Status changes since a cursor, oldest first"""
    try:
        after = int(request.query_params.get('after', 0))
    except ValueError:
        raise ValidationError({'after': 'Must be an integer update id'})

    updates = OrderStatusUpdate.objects.select_related('order').filter(id__gt=after)
    if request.user.is_customer:
        updates = updates.filter(order__customer=request.user)
    updates = updates.order_by('id')[:settings.ORDER_FEED_PAGE_SIZE]

    events = [OrderChangeEvent.from_update(update)._asdict() for update in updates]
    logger.debug(f"Feed for {request.user.email} after {after}: {len(events)} events")
    return Response({
        'events': OrderChangeEventSerializer(events, many=True).data,
        'cursor': events[-1]['update_id'] if events else after,
    })
