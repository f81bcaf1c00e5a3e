from django.contrib import admin

from .models import MenuItem


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'price', 'is_available', 'updated_at']
    list_filter = ['category', 'is_available']
    list_editable = ['price', 'is_available']
    search_fields = ['name', 'description']
