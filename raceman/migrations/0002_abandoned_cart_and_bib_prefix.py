"""
Abandoned carts with their reminder log, and unique bib prefixes per race.
"""

from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('raceman', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AbandonedCart',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_email', models.EmailField(db_index=True, max_length=254, verbose_name='E-mail')),
                ('customer_name', models.CharField(blank=True, default='', max_length=200, verbose_name='Nome')),
                ('items', models.JSONField(blank=True, default=list, verbose_name='Itens')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, verbose_name='Total')),
                ('coupon_code', models.CharField(blank=True, default='', max_length=50, verbose_name='Cupom')),
                ('status', models.CharField(choices=[('ACTIVE', 'Ativo'), ('ABANDONED', 'Abandonado'), ('CONVERTED', 'Convertido'), ('ARCHIVED', 'Arquivado')], default='ACTIVE', max_length=20, verbose_name='Status')),
                ('last_step', models.CharField(choices=[('CART', 'Carrinho'), ('IDENTIFICATION', 'Identificação'), ('DELIVERY', 'Entrega'), ('PAYMENT', 'Pagamento')], default='CART', max_length=20, verbose_name='Última etapa')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('last_activity_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Última atividade')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='abandoned_carts', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
            ],
            options={
                'verbose_name': 'Carrinho abandonado',
                'verbose_name_plural': 'Carrinhos abandonados',
                'ordering': ['-last_activity_at'],
            },
        ),
        migrations.AddIndex(
            model_name='abandonedcart',
            index=models.Index(fields=['status', 'last_activity_at'], name='raceman_cart_status_idx'),
        ),
        migrations.AddField(
            model_name='emaillog',
            name='abandoned_cart',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='email_logs', to='raceman.abandonedcart', verbose_name='Carrinho'),
        ),
        migrations.AlterField(
            model_name='emaillog',
            name='type',
            field=models.CharField(choices=[('abandonedCart', 'Carrinho abandonado'), ('pendingRegistration', 'Identificação pendente')], max_length=30, verbose_name='Tipo'),
        ),
        migrations.AddConstraint(
            model_name='raceoption',
            constraint=models.UniqueConstraint(condition=models.Q(('bib_prefix__isnull', False)), fields=('race', 'bib_prefix'), name='unique_bib_prefix_per_race'),
        ),
    ]
