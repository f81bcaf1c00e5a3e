import django.utils.timezone
from django.db import migrations, models
from django.utils import timezone


def fill_token_dates(apps, schema_editor):
    Order = apps.get_model('orders', 'Order')
    for order in Order.objects.only('id', 'created_at').iterator():
        Order.objects.filter(pk=order.pk).update(token_date=timezone.localtime(order.created_at).date())


class Migration(migrations.Migration):

    dependencies = [
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='order',
            name='token_date',
            field=models.DateField(default=django.utils.timezone.localdate, editable=False),
        ),
        migrations.RunPython(fill_token_dates, migrations.RunPython.noop),
        migrations.AddConstraint(
            model_name='order',
            constraint=models.UniqueConstraint(fields=('token_date', 'token'), name='orders_unique_daily_token'),
        ),
    ]
