from rest_framework import serializers

from orders.utils import format_currency
from .models import MenuItem


class MenuItemSerializer(serializers.ModelSerializer):
    category_display = serializers.CharField(source='get_category_display', read_only=True)
    price_display = serializers.SerializerMethodField()

    class Meta:
        model = MenuItem
        fields = [
            'id', 'name', 'description', 'category', 'category_display',
            'price', 'price_display', 'image_url', 'is_available'
        ]
        read_only_fields = fields

    def get_price_display(self, obj):
        return format_currency(obj.price)


class CategorySerializer(serializers.Serializer):
    value = serializers.CharField()
    label = serializers.CharField()
