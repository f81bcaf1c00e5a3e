from rest_framework import serializers

from inventory.models import MenuItem
from .lifecycle import ACTIONS, allowed_transitions
from .models import Order, OrderItem, OrderStatus, OrderStatusUpdate, PaymentMethod
from .utils import format_currency


# =============== CART ===============

class CartLineSerializer(serializers.Serializer):
    menu_item_id = serializers.CharField()
    name = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    quantity = serializers.IntegerField()
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2)


def cart_data(cart):
    return {
        'items': CartLineSerializer(list(cart), many=True).data,
        'item_count': len(cart),
        'total': str(cart.total),
        'total_display': format_currency(cart.total),
    }


class CartAddSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()

    def validate_menu_item_id(self, value):
        try:
            self.menu_item = MenuItem.objects.get(id=value, is_available=True)
        except MenuItem.DoesNotExist:
            raise serializers.ValidationError("Menu item not found or not available")
        return value


class CartQuantitySerializer(serializers.Serializer):
    delta = serializers.IntegerField()

    def validate_delta(self, value):
        if value == 0:
            raise serializers.ValidationError("delta must not be zero")
        return value


# =============== ORDER PLACEMENT ===============

class PlaceOrderItemSerializer(serializers.Serializer):
    menu_item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class PlaceOrderSerializer(serializers.Serializer):
    payment_method = serializers.ChoiceField(choices=PaymentMethod.choices, default=PaymentMethod.CASH)
    # Clients that keep their own cart send it here; otherwise the session cart is used
    items = PlaceOrderItemSerializer(many=True, required=False)

    def validate_items(self, value):
        seen = set()
        for row in value:
            if row['menu_item_id'] in seen:
                raise serializers.ValidationError("Each menu item may appear only once")
            seen.add(row['menu_item_id'])
        return value


# =============== ORDER READ ===============

class OrderItemReadSerializer(serializers.ModelSerializer):
    menu_item_id = serializers.UUIDField(source='menu_item.id', read_only=True)
    menu_item_name = serializers.CharField(source='menu_item.name', read_only=True)
    category = serializers.CharField(source='menu_item.category', read_only=True)
    line_total = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    line_total_display = serializers.SerializerMethodField()

    class Meta:
        model = OrderItem
        fields = [
            'id', 'menu_item_id', 'menu_item_name', 'category',
            'quantity', 'price', 'line_total', 'line_total_display'
        ]

    def get_line_total_display(self, obj):
        return format_currency(obj.line_total)


class StatusUpdateSerializer(serializers.ModelSerializer):
    updated_by_name = serializers.CharField(source='updated_by.name', read_only=True, default=None)

    class Meta:
        model = OrderStatusUpdate
        fields = ['id', 'status', 'message', 'updated_by', 'updated_by_name', 'created_at']


class OrderReadSerializer(serializers.ModelSerializer):
    items = OrderItemReadSerializer(many=True, read_only=True)
    display_number = serializers.CharField(read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    customer_mobile = serializers.CharField(source='customer.mobile', read_only=True)
    total_display = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'display_number', 'token', 'customer', 'customer_name', 'customer_mobile',
            'total_amount', 'total_display', 'payment_method', 'status',
            'created_at', 'updated_at', 'items'
        ]

    def get_total_display(self, obj):
        return format_currency(obj.total_amount)


class CustomerOrderSerializer(OrderReadSerializer):
    """A customer's order with its three most recent status updates"""
    recent_updates = serializers.SerializerMethodField()

    class Meta(OrderReadSerializer.Meta):
        fields = OrderReadSerializer.Meta.fields + ['recent_updates']

    def get_recent_updates(self, obj):
        updates = sorted(obj.status_updates.all(), key=lambda u: (u.created_at, u.id), reverse=True)
        return StatusUpdateSerializer(updates[:3], many=True).data


class OrderDetailSerializer(OrderReadSerializer):
    status_updates = StatusUpdateSerializer(many=True, read_only=True)

    class Meta(OrderReadSerializer.Meta):
        fields = OrderReadSerializer.Meta.fields + ['status_updates']


class ActiveOrderSerializer(OrderReadSerializer):
    """Kitchen queue entry: who ordered, what, and which buttons to show"""
    customer_email = serializers.EmailField(source='customer.email', read_only=True)
    available_actions = serializers.SerializerMethodField()

    class Meta(OrderReadSerializer.Meta):
        fields = OrderReadSerializer.Meta.fields + ['customer_email', 'available_actions']

    def get_available_actions(self, obj):
        return [
            {'action': t.action, 'status': t.target, 'message': t.message}
            for t in allowed_transitions(obj.status)
        ]


# =============== STATUS CHANGES ===============

class TransitionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    action = serializers.ChoiceField(choices=ACTIONS, required=False)
    message = serializers.CharField(required=False, allow_blank=True, max_length=500)

    def validate(self, data):
        if ('status' in data) == ('action' in data):
            raise serializers.ValidationError("Provide exactly one of 'status' or 'action'")
        return data


class OrderChangeEventSerializer(serializers.Serializer):
    update_id = serializers.IntegerField()
    order_id = serializers.CharField()
    customer_id = serializers.CharField()
    status = serializers.CharField()
    message = serializers.CharField(allow_blank=True)
    created_at = serializers.DateTimeField()
