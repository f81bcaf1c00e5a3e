from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    # Cart
    path('cart/', views.CartView.as_view(), name='cart'),
    path('cart/<uuid:item_id>/', views.CartLineView.as_view(), name='cart-line'),

    # Customer orders
    path('place/', views.PlaceOrderView.as_view(), name='order-place'),
    path('mine/', views.MyOrderListView.as_view(), name='my-orders'),

    # Kitchen
    path('active/', views.ActiveOrderListView.as_view(), name='active-orders'),
    path('<uuid:pk>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<uuid:pk>/transition/', views.transition, name='order-transition'),

    # Change feed
    path('feed/', views.order_feed, name='order-feed'),
]
