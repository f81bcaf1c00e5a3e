from django.urls import path
from . import views


urlpatterns = [
    path('items/', views.MenuListView.as_view(), name='menu-list'),
    path('items/<uuid:pk>/', views.MenuItemDetailView.as_view(), name='menu-detail'),
    path('categories/', views.category_list, name='menu-categories'),
]
