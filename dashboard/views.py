import logging
from datetime import datetime

from django.http import HttpResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.negotiation import DefaultContentNegotiation
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from authentication.permissions import IsAdmin
from orders.models import Order
from .reports import export_excel, export_pdf, summarize_orders
from .serializers import SalesSummarySerializer

logger = logging.getLogger(__name__)

DATE_PARAMETERS = [
    OpenApiParameter('start_date', OpenApiTypes.DATE, OpenApiParameter.QUERY,
                     description="First day to include (YYYY-MM-DD)"),
    OpenApiParameter('end_date', OpenApiTypes.DATE, OpenApiParameter.QUERY,
                     description="Last day to include (YYYY-MM-DD)"),
]


def _parse_date(request, name):
    value = request.query_params.get(name)
    if not value:
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise ValidationError({name: "Use the YYYY-MM-DD format"})


def _report_orders(request):
    start_date = _parse_date(request, 'start_date')
    end_date = _parse_date(request, 'end_date')
    if start_date and end_date and start_date > end_date:
        raise ValidationError({'end_date': "end_date must not be before start_date"})

    orders = Order.objects.select_related('customer').prefetch_related('items__menu_item')
    if start_date:
        orders = orders.filter(created_at__date__gte=start_date)
    if end_date:
        orders = orders.filter(created_at__date__lte=end_date)
    return orders.order_by('-created_at'), start_date, end_date


@extend_schema(parameters=DATE_PARAMETERS, responses={200: SalesSummarySerializer})
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def sales_analytics(request):
    """Revenue, average order value, payment mix and cancellation rate"""
    orders, start_date, end_date = _report_orders(request)
    summary = summarize_orders(orders)
    logger.info(f"Sales analytics for {request.user.email}: {summary.total_orders} orders "
                f"({start_date or 'start'} to {end_date or 'today'})")
    return Response(SalesSummarySerializer(summary).data)


class IgnoreFormatNegotiation(DefaultContentNegotiation):
    """``format`` picks the report type here, not the renderer"""

    def select_renderer(self, request, renderers, format_suffix=None):
        return (renderers[0], renderers[0].media_type)


class ExportSalesReportView(APIView):
    """Download the sales summary as an Excel workbook or a PDF"""
    permission_classes = [IsAuthenticated, IsAdmin]
    content_negotiation_class = IgnoreFormatNegotiation

    @extend_schema(
        parameters=DATE_PARAMETERS + [
            OpenApiParameter('format', OpenApiTypes.STR, OpenApiParameter.QUERY, enum=['excel', 'pdf']),
        ],
        responses={(200, 'application/octet-stream'): OpenApiTypes.BINARY},
    )
    def get(self, request):
        format_type = request.query_params.get('format', 'excel')
        if format_type not in ('excel', 'pdf'):
            raise ValidationError({'format': "Choose 'excel' or 'pdf'"})

        orders, start_date, end_date = _report_orders(request)
        summary = summarize_orders(orders)
        stamp = f"{start_date or 'all'}_{end_date or 'today'}"

        if format_type == 'excel':
            response = HttpResponse(
                export_excel(summary, start_date, end_date),
                content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
            )
            response['Content-Disposition'] = f'attachment; filename="sales_report_{stamp}.xlsx"'
        else:
            response = HttpResponse(export_pdf(summary, start_date, end_date), content_type='application/pdf')
            response['Content-Disposition'] = f'attachment; filename="sales_report_{stamp}.pdf"'

        logger.info(f"Sales report exported as {format_type} by {request.user.email}")
        return response
