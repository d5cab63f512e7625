"""
Raceman Admin.

State owned by the registration service (participant status, bib numbers,
kit status, delivery status) is read-only here and changes through actions:
- Race: catalog editing + "generate bibs" / "remind pending" actions
- Participant: read-only lifecycle fields + "validate" / "block" actions
- Order: read-only delivery status + "mark printed" action
- AbandonedCart, DeliveryAttempt, EmailLog: read-only, written by the storefront and services
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from raceman.exceptions import RegistrationError
from raceman.models import (
    AbandonedCart,
    Combo,
    ComboItem,
    Coupon,
    DeliveryAttempt,
    EmailLog,
    Lot,
    Order,
    Participant,
    Race,
    RaceOption,
    TeamMember,
)
from raceman.models.enums import DeliveryMethod

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """No add, change or delete: rows only change through the service."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# RACE ADMIN
# =========================================================================

class RaceOptionInline(admin.TabularInline):
    model = RaceOption
    extra = 0
    fields = ['distance', 'bib_prefix', 'position']


@admin.register(Race)
class RaceAdmin(admin.ModelAdmin):
    """Race admin — editable, with bib generation and reminders."""

    list_display = ['name', 'date', 'location', 'status', 'effective_status_display', 'capacity']
    list_filter = ['status', 'date']
    search_fields = ['name', 'location']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'date'
    inlines = [RaceOptionInline]
    actions = ['generate_bib_numbers', 'remind_pending']

    @admin.display(description=_('Situação'))
    def effective_status_display(self, obj):
        return obj.get_status_display() if obj.effective_status == obj.status else _('Encerrado')

    @admin.action(description=_('Gerar números de peito'))
    def generate_bib_numbers(self, request, queryset):
        from raceman import registration

        for race in queryset:
            try:
                count = registration.generate_bib_numbers(race.pk)
            except RegistrationError as exc:
                self.message_user(request, f"{race.name}: {exc.message}", messages.ERROR)
                continue
            self.message_user(
                request,
                _('{race}: {count} número(s) de peito gerado(s).').format(race=race.name, count=count),
            )

    @admin.action(description=_('Lembrar identificação pendente'))
    def remind_pending(self, request, queryset):
        from raceman import registration

        for race in queryset:
            sent, failed = registration.remind_pending(race.pk)
            level = messages.WARNING if failed else messages.SUCCESS
            self.message_user(
                request,
                _('{race}: {sent} lembrete(s) enviado(s), {failed} falha(s).').format(
                    race=race.name, sent=sent, failed=failed,
                ),
                level,
            )


@admin.register(Lot)
class LotAdmin(admin.ModelAdmin):
    list_display = ['name', 'option', 'price', 'start_date', 'end_date']
    list_filter = ['option__race']
    search_fields = ['name', 'option__distance', 'option__race__name']


# =========================================================================
# PARTICIPANT ADMIN
# =========================================================================

@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    """Participant admin — lifecycle fields read-only, transitions via actions."""

    list_display = ['__str__', 'race', 'modality', 'status', 'bib_number', 'kit_status', 'order']
    list_filter = ['race', 'status', 'kit_status', 'modality']
    search_fields = ['bib_number', 'order__order_number', 'user_profile__full_name',
                     'user_profile__document_number', 'user_profile__email']
    readonly_fields = ['id', 'race', 'order', 'user', 'modality', 'status', 'user_profile',
                       'bib_number', 'kit_status', 'kit_withdrawn_at', 'kit_withdrawn_by',
                       'kit_observation', 'created_at', 'updated_at']
    actions = ['mark_validated', 'block']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.action(description=_('Validar inscrições selecionadas'))
    def mark_validated(self, request, queryset):
        from raceman import registration

        count = 0
        for participant in queryset:
            try:
                registration.mark_validated(participant.pk, user=request.user)
                count += 1
            except RegistrationError as exc:
                logger.warning("mark_validated: %s skipped: %s", participant.pk, exc.code)

        self.message_user(request, _('{count} inscrição(ões) validada(s).').format(count=count))

    @admin.action(description=_('Bloquear inscrições selecionadas'))
    def block(self, request, queryset):
        from raceman import registration

        count = 0
        for participant in queryset:
            registration.block(participant.pk, reason='Bloqueado via admin', user=request.user)
            count += 1

        self.message_user(request, _('{count} inscrição(ões) bloqueada(s).').format(count=count))


# =========================================================================
# ORDER ADMIN
# =========================================================================

class DeliveryAttemptInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = DeliveryAttempt
    extra = 0
    fields = ['timestamp', 'agent_name', 'status', 'observation']
    readonly_fields = fields


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Order admin — delivery status changes via the service."""

    list_display = ['order_number', 'race', 'responsible_name', 'total_amount',
                    'delivery_method', 'kit_delivery_status', 'created_at']
    list_filter = ['race', 'delivery_method', 'kit_delivery_status']
    search_fields = ['order_number', 'responsible_name', 'responsible_email']
    readonly_fields = ['order_number', 'kit_delivery_status', 'first_printed_at',
                       'coupon', 'coupon_code', 'discount_amount', 'created_at', 'updated_at']
    inlines = [DeliveryAttemptInline]
    actions = ['mark_printed']

    @admin.action(description=_('Marcar etiquetas como impressas'))
    def mark_printed(self, request, queryset):
        from raceman import registration

        count = 0
        for order in queryset.filter(delivery_method=DeliveryMethod.HOME):
            registration.mark_printed(order.pk)
            count += 1

        self.message_user(request, _('{count} pedido(s) processado(s).').format(count=count))


@admin.register(DeliveryAttempt)
class DeliveryAttemptAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """DeliveryAttempt admin — read-only. Immutable audit trail."""

    list_display = ['timestamp', 'order', 'agent_name', 'status', 'observation']
    list_filter = ['status', 'timestamp']
    search_fields = ['order__order_number', 'agent_name', 'observation']
    date_hierarchy = 'timestamp'


# =========================================================================
# CATALOG ADMIN
# =========================================================================

class ComboItemInline(admin.TabularInline):
    model = ComboItem
    extra = 1


@admin.register(Combo)
class ComboAdmin(admin.ModelAdmin):
    list_display = ['name', 'race', 'price', 'active']
    list_filter = ['active', 'race']
    search_fields = ['name']
    inlines = [ComboItemInline]


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ['code', 'title', 'discount_type', 'discount_value', 'current_uses',
                    'max_uses', 'is_active', 'end_date']
    list_filter = ['is_active', 'discount_type']
    search_fields = ['code', 'title']
    readonly_fields = ['current_uses', 'created_at']


# =========================================================================
# ATHLETES / E-MAIL
# =========================================================================

@admin.register(TeamMember)
class TeamMemberAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'owner', 'document_type', 'document_number', 'email']
    search_fields = ['full_name', 'document_number', 'email']
    readonly_fields = ['created_at']


@admin.register(EmailLog)
class EmailLogAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """EmailLog admin — read-only."""

    list_display = ['timestamp', 'recipient_email', 'type', 'status', 'participant', 'abandoned_cart']
    list_filter = ['type', 'status']
    search_fields = ['recipient_email']
    date_hierarchy = 'timestamp'


@admin.register(AbandonedCart)
class AbandonedCartAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """AbandonedCart admin — read-only; reminders go out via send_abandoned_cart_reminders."""

    list_display = ['customer_email', 'customer_name', 'race_name', 'status', 'last_step', 'last_activity_at']
    list_filter = ['status', 'last_step']
    search_fields = ['customer_email', 'customer_name']
    date_hierarchy = 'last_activity_at'
