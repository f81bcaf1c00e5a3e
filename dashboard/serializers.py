from rest_framework import serializers

from orders.serializers import OrderReadSerializer
from orders.utils import format_currency


class SalesSummarySerializer(serializers.Serializer):
    total_orders = serializers.IntegerField()
    completed_count = serializers.SerializerMethodField()
    cancelled_count = serializers.SerializerMethodField()
    total_revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
    total_revenue_display = serializers.SerializerMethodField()
    average_order_value = serializers.DecimalField(max_digits=12, decimal_places=2)
    average_order_value_display = serializers.SerializerMethodField()
    payment_methods = serializers.DictField(child=serializers.IntegerField())
    cancellation_rate = serializers.FloatField()
    completed = OrderReadSerializer(many=True)
    cancelled = OrderReadSerializer(many=True)

    def get_completed_count(self, obj):
        return len(obj.completed)

    def get_cancelled_count(self, obj):
        return len(obj.cancelled)

    def get_total_revenue_display(self, obj):
        return format_currency(obj.total_revenue)

    def get_average_order_value_display(self, obj):
        return format_currency(obj.average_order_value)
