"""
Initial migration for Raceman models.
"""

from decimal import Decimal
import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Raceman models: races, orders, participants, delivery, catalog, e-mail log."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Race',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('date', models.DateField(db_index=True, verbose_name='Data')),
                ('location', models.CharField(blank=True, default='', max_length=200, verbose_name='Local')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('capacity', models.PositiveIntegerField(blank=True, help_text='Vazio = ilimitado', null=True, verbose_name='Vagas')),
                ('status', models.CharField(choices=[('draft', 'Rascunho'), ('published', 'Publicado'), ('closed', 'Encerrado')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('kit_pickup_enabled', models.BooleanField(default=True, verbose_name='Retirada de kit')),
                ('kit_pickup_location', models.CharField(blank=True, default='', max_length=200, verbose_name='Local de retirada')),
                ('kit_pickup_details', models.TextField(blank=True, default='', verbose_name='Detalhes da retirada')),
                ('kit_delivery_enabled', models.BooleanField(default=False, verbose_name='Entrega em domicílio')),
                ('kit_delivery_price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, verbose_name='Taxa de entrega')),
                ('kit_items', models.JSONField(blank=True, default=list, help_text='Lista de {"name": ..., "brand": ...}', verbose_name='Itens do kit')),
                ('show_kit_items', models.BooleanField(default=False, verbose_name='Exibir itens do kit')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Evento',
                'verbose_name_plural': 'Eventos',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='RaceOption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('distance', models.CharField(help_text='Ex: 5K, 10K, Caminhada', max_length=50, verbose_name='Modalidade')),
                ('bib_prefix', models.PositiveIntegerField(blank=True, null=True, verbose_name='Prefixo do número de peito')),
                ('position', models.PositiveSmallIntegerField(default=0, verbose_name='Ordem')),
                ('race', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='options', to='raceman.race', verbose_name='Evento')),
            ],
            options={
                'verbose_name': 'Modalidade',
                'verbose_name_plural': 'Modalidades',
                'ordering': ['race', 'position', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='Lot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Nome')),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='Preço')),
                ('start_date', models.DateField(verbose_name='Início')),
                ('end_date', models.DateField(verbose_name='Fim')),
                ('option', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lots', to='raceman.raceoption', verbose_name='Modalidade')),
            ],
            options={
                'verbose_name': 'Lote',
                'verbose_name_plural': 'Lotes',
                'ordering': ['option', 'start_date'],
            },
        ),
        migrations.CreateModel(
            name='Coupon',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200, verbose_name='Título')),
                ('code', models.CharField(max_length=50, unique=True, verbose_name='Código')),
                ('discount_type', models.CharField(choices=[('percentage', 'Percentual'), ('fixed', 'Valor fixo')], default='percentage', max_length=20, verbose_name='Tipo de desconto')),
                ('discount_value', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='Valor')),
                ('start_date', models.DateTimeField(blank=True, null=True, verbose_name='Início')),
                ('end_date', models.DateTimeField(blank=True, null=True, verbose_name='Fim')),
                ('max_uses', models.PositiveIntegerField(blank=True, help_text='Vazio = ilimitado', null=True, verbose_name='Limite de usos')),
                ('current_uses', models.PositiveIntegerField(default=0, verbose_name='Usos')),
                ('is_active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Cupom',
                'verbose_name_plural': 'Cupons',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Combo',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Nome')),
                ('description', models.TextField(blank=True, default='', verbose_name='Descrição')),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, verbose_name='Preço')),
                ('active', models.BooleanField(default=True, verbose_name='Ativo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('race', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='combos', to='raceman.race', verbose_name='Evento')),
            ],
            options={
                'verbose_name': 'Combo',
                'verbose_name_plural': 'Combos',
                'ordering': ['race', 'name'],
            },
        ),
        migrations.CreateModel(
            name='ComboItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('modality', models.CharField(max_length=50, verbose_name='Modalidade')),
                ('quantity', models.PositiveIntegerField(default=1, verbose_name='Quantidade')),
                ('combo', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='raceman.combo', verbose_name='Combo')),
            ],
            options={
                'verbose_name': 'Item do combo',
                'verbose_name_plural': 'Itens do combo',
            },
        ),
        migrations.CreateModel(
            name='TeamMember',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=200, verbose_name='Nome completo')),
                ('birth_date', models.DateField(blank=True, null=True, verbose_name='Nascimento')),
                ('document_type', models.CharField(choices=[('CPF', 'CPF'), ('RG', 'RG'), ('Passaporte', 'Passaporte')], default='CPF', max_length=20, verbose_name='Tipo de documento')),
                ('document_number', models.CharField(max_length=30, verbose_name='Documento')),
                ('gender', models.CharField(choices=[('Masculino', 'Masculino'), ('Feminino', 'Feminino'), ('Outro', 'Outro')], max_length=20, verbose_name='Gênero')),
                ('email', models.EmailField(max_length=254, verbose_name='E-mail')),
                ('mobile_phone', models.CharField(max_length=30, verbose_name='Celular')),
                ('shirt_size', models.CharField(blank=True, default='', max_length=10, verbose_name='Camiseta')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='team_members', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
            ],
            options={
                'verbose_name': 'Membro da equipe',
                'verbose_name_plural': 'Membros da equipe',
                'ordering': ['owner', 'full_name'],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(max_length=20, unique=True, verbose_name='Número do pedido')),
                ('order_status', models.CharField(default='PAGO', max_length=30, verbose_name='Status do pedido')),
                ('order_status_detail', models.CharField(blank=True, default='', max_length=200, verbose_name='Detalhe')),
                ('responsible_name', models.CharField(max_length=200, verbose_name='Responsável')),
                ('responsible_email', models.EmailField(max_length=254, verbose_name='E-mail do responsável')),
                ('responsible_phone', models.CharField(blank=True, default='', max_length=30, verbose_name='Telefone')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, verbose_name='Total')),
                ('delivery_method', models.CharField(choices=[('pickup', 'Retirada'), ('home', 'Entrega em domicílio')], default='pickup', max_length=10, verbose_name='Forma de entrega')),
                ('delivery_fee', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, verbose_name='Taxa de entrega')),
                ('delivery_address', models.TextField(blank=True, default='', verbose_name='Endereço de entrega')),
                ('kit_delivery_status', models.CharField(blank=True, choices=[('Pendente', 'Pendente'), ('Impresso', 'Impresso'), ('Entregue', 'Entregue'), ('NaoAtendido', 'Não Atendido'), ('Problema', 'Problema')], db_index=True, max_length=20, null=True, verbose_name='Status da entrega')),
                ('first_printed_at', models.DateTimeField(blank=True, null=True, verbose_name='Etiqueta impressa em')),
                ('coupon_code', models.CharField(blank=True, default='', max_length=50, verbose_name='Código do cupom')),
                ('discount_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=10, verbose_name='Desconto')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('coupon', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='raceman.coupon', verbose_name='Cupom')),
                ('race', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='raceman.race', verbose_name='Evento')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='race_orders', to=settings.AUTH_USER_MODEL, verbose_name='Usuário')),
            ],
            options={
                'verbose_name': 'Pedido',
                'verbose_name_plural': 'Pedidos',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Participant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('modality', models.CharField(help_text='Igual ao campo distance de uma modalidade do evento', max_length=50, verbose_name='Modalidade')),
                ('status', models.CharField(choices=[('PENDENTE_IDENTIFICACAO', 'Pendente'), ('IDENTIFICADA', 'Identificado'), ('VALIDADA', 'Validado'), ('BLOQUEADA', 'Bloqueado')], db_index=True, default='PENDENTE_IDENTIFICACAO', max_length=30, verbose_name='Status')),
                ('user_profile', models.JSONField(blank=True, help_text='Cópia dos dados no momento da identificação', null=True, verbose_name='Dados do atleta')),
                ('bib_number', models.CharField(blank=True, db_index=True, max_length=20, null=True, verbose_name='Número de peito')),
                ('kit_status', models.CharField(choices=[('pendente', 'Pendente'), ('retirado', 'Retirado')], db_index=True, default='pendente', max_length=20, verbose_name='Status do kit')),
                ('shirt_size', models.CharField(blank=True, default='', max_length=10, verbose_name='Camiseta')),
                ('kit_type', models.CharField(blank=True, default='', max_length=50, verbose_name='Tipo de kit')),
                ('kit_withdrawn_at', models.DateTimeField(blank=True, null=True, verbose_name='Retirado em')),
                ('kit_withdrawn_by', models.CharField(blank=True, default='', help_text='Preenchido quando quem retira não é o atleta', max_length=200, verbose_name='Retirado por')),
                ('kit_observation', models.TextField(blank=True, default='', verbose_name='Observação da retirada')),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='participants', to='raceman.order', verbose_name='Pedido')),
                ('race', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='participants', to='raceman.race', verbose_name='Evento')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='registrations', to=settings.AUTH_USER_MODEL, verbose_name='Responsável')),
            ],
            options={
                'verbose_name': 'Inscrição',
                'verbose_name_plural': 'Inscrições',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='DeliveryAttempt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('agent_name', models.CharField(max_length=200, verbose_name='Nome do entregador')),
                ('status', models.CharField(choices=[('Entregue', 'Entregue'), ('NaoAtendido', 'Não Atendido'), ('Problema', 'Problema')], max_length=20, verbose_name='Resultado')),
                ('observation', models.TextField(blank=True, default='', verbose_name='Observação')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('agent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL, verbose_name='Entregador')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='delivery_attempts', to='raceman.order', verbose_name='Pedido')),
            ],
            options={
                'verbose_name': 'Tentativa de entrega',
                'verbose_name_plural': 'Tentativas de entrega',
                'ordering': ['timestamp', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='EmailLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('recipient_email', models.EmailField(db_index=True, max_length=254, verbose_name='Destinatário')),
                ('type', models.CharField(choices=[('pendingRegistration', 'Identificação pendente')], max_length=30, verbose_name='Tipo')),
                ('status', models.CharField(choices=[('sent', 'Enviado'), ('failed', 'Falhou')], default='sent', max_length=10, verbose_name='Status')),
                ('error', models.TextField(blank=True, default='', verbose_name='Erro')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Data/Hora')),
                ('participant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='email_logs', to='raceman.participant', verbose_name='Inscrição')),
            ],
            options={
                'verbose_name': 'Envio de e-mail',
                'verbose_name_plural': 'Envios de e-mail',
                'ordering': ['-timestamp'],
            },
        ),
        # Constraints
        migrations.AddConstraint(
            model_name='raceoption',
            constraint=models.UniqueConstraint(fields=('race', 'distance'), name='unique_race_option_distance'),
        ),
        migrations.AddConstraint(
            model_name='participant',
            constraint=models.UniqueConstraint(condition=models.Q(('bib_number__isnull', False)), fields=('race', 'bib_number'), name='unique_bib_number_per_race'),
        ),
        # Indexes
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['race', 'delivery_method'], name='raceman_ord_race_delivery_idx'),
        ),
        migrations.AddIndex(
            model_name='participant',
            index=models.Index(fields=['race', 'status'], name='raceman_ptc_race_status_idx'),
        ),
        migrations.AddIndex(
            model_name='participant',
            index=models.Index(fields=['race', 'modality'], name='raceman_ptc_race_modality_idx'),
        ),
        migrations.AddIndex(
            model_name='deliveryattempt',
            index=models.Index(fields=['order', 'timestamp'], name='raceman_att_order_ts_idx'),
        ),
        migrations.AddIndex(
            model_name='emaillog',
            index=models.Index(fields=['recipient_email', 'status', 'timestamp'], name='raceman_log_recipient_idx'),
        ),
    ]
