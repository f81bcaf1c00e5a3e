from django.urls import path
from . import views

app_name = 'dashboard'

urlpatterns = [
    path('analytics/', views.sales_analytics, name='sales-analytics'),
    path('export/', views.ExportSalesReportView.as_view(), name='export-report'),
]
