from rest_framework import generics, filters
from rest_framework.decorators import api_view
from rest_framework.response import Response
from django_filters.rest_framework import DjangoFilterBackend
import django_filters
from drf_spectacular.utils import extend_schema

from .models import MenuItem
from .serializers import MenuItemSerializer, CategorySerializer

ALL_CATEGORIES = 'all'


class MenuItemFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(
        choices=[(ALL_CATEGORIES, 'All Items')] + list(MenuItem.Category.choices),
        method='filter_category',
    )

    class Meta:
        model = MenuItem
        fields = ['category']

    def filter_category(self, queryset, name, value):
        if value == ALL_CATEGORIES:
            return queryset
        return queryset.filter(category=value)


class MenuListView(generics.ListAPIView):
    """
    get: List the available menu, optionally for one category (``?category=veg``)
    """
    serializer_class = MenuItemSerializer
    filter_backends = [DjangoFilterBackend, filters.SearchFilter]
    filterset_class = MenuItemFilter
    search_fields = ['name', 'description']

    def get_queryset(self):
        # Unavailable items never leave the database
        return MenuItem.objects.filter(is_available=True).order_by('category', 'name')


class MenuItemDetailView(generics.RetrieveAPIView):
    """Get one menu item, available or not"""
    serializer_class = MenuItemSerializer
    queryset = MenuItem.objects.all()


@extend_schema(responses={200: CategorySerializer(many=True)})
@api_view(['GET'])
def category_list(request):
    """Menu categories in display order, led by the catch-all"""
    categories = [{'value': ALL_CATEGORIES, 'label': 'All Items'}] + [
        {'value': value, 'label': label} for value, label in MenuItem.Category.choices
    ]
    return Response(CategorySerializer(categories, many=True).data)
