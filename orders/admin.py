from django.contrib import admin

from .models import Order, OrderItem, OrderStatusUpdate


class ReadOnlyInline(admin.TabularInline):
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class OrderItemInline(ReadOnlyInline):
    model = OrderItem
    fields = ['menu_item', 'quantity', 'price']
    readonly_fields = fields


class OrderStatusUpdateInline(ReadOnlyInline):
    model = OrderStatusUpdate
    fields = ['status', 'message', 'updated_by', 'created_at']
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['display_number', 'token', 'customer', 'total_amount', 'payment_method', 'status', 'created_at']
    list_filter = ['status', 'payment_method', 'created_at']
    search_fields = ['id', 'customer__email', 'customer__name']
    readonly_fields = ['id', 'token', 'customer', 'total_amount', 'payment_method', 'status', 'created_at', 'updated_at']
    inlines = [OrderItemInline, OrderStatusUpdateInline]

    def has_delete_permission(self, request, obj=None):
        return False
