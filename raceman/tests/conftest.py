"""
Pytest fixtures for Raceman tests.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from raceman.adapters.mail import reset_email_dispatcher
from raceman.models import Lot, Order, Participant, Race, RaceOption, TeamMember
from raceman.models.enums import (
    DeliveryMethod,
    DocumentType,
    Gender,
    KitDeliveryStatus,
    ParticipantStatus,
    RaceStatus,
)


User = get_user_model()

# Valid CPFs (check digits verified)
CPF_ANA = '52998224725'
CPF_BEATRIZ = '11144477735'


@pytest.fixture(autouse=True)
def _fresh_dispatcher():
    """Each test loads the e-mail dispatcher from its own settings."""
    reset_email_dispatcher()
    yield
    reset_email_dispatcher()


@pytest.fixture
def user(db):
    """Create a buyer."""
    return User.objects.create_user(
        username='comprador',
        password='testpass123',
        email='comprador@exemplo.com.br',
    )


@pytest.fixture
def other_user(db):
    """Create another buyer."""
    return User.objects.create_user(
        username='outro',
        password='testpass123',
        email='outro@exemplo.com.br',
    )


@pytest.fixture
def staff(db):
    """Create a staff member."""
    return User.objects.create_user(
        username='staff',
        password='testpass123',
        first_name='Joana',
        last_name='Entregadora',
        is_staff=True,
    )


@pytest.fixture
def race(db):
    """Published race 30 days ahead, home delivery enabled."""
    return Race.objects.create(
        name='Corrida da Primavera',
        date=timezone.localdate() + timedelta(days=30),
        location='Parque Central',
        status=RaceStatus.PUBLISHED,
        kit_delivery_enabled=True,
        kit_delivery_price=Decimal('15.00'),
    )


@pytest.fixture
def closed_race(db):
    """Published race whose date has passed."""
    return Race.objects.create(
        name='Corrida de Verão',
        date=timezone.localdate() - timedelta(days=1),
        status=RaceStatus.PUBLISHED,
    )


@pytest.fixture
def option_5k(race):
    """5K modality, prefix 5, with a lot valid today."""
    option = RaceOption.objects.create(race=race, distance='5K', bib_prefix=5, position=1)
    Lot.objects.create(
        option=option,
        name='1º Lote',
        price=Decimal('80.00'),
        start_date=timezone.localdate() - timedelta(days=10),
        end_date=timezone.localdate() + timedelta(days=10),
    )
    return option


@pytest.fixture
def option_10k(race):
    """10K modality, prefix 10, with a lot valid today."""
    option = RaceOption.objects.create(race=race, distance='10K', bib_prefix=10, position=2)
    Lot.objects.create(
        option=option,
        name='1º Lote',
        price=Decimal('100.00'),
        start_date=timezone.localdate() - timedelta(days=10),
        end_date=timezone.localdate() + timedelta(days=10),
    )
    return option


def order_for(race, user, number, method=DeliveryMethod.PICKUP, **extra):
    fields = {
        'responsible_name': 'Maria Souza',
        'responsible_email': 'maria@exemplo.com.br',
        'responsible_phone': '11999990000',
        **extra,
    }
    return Order.objects.create(
        order_number=number,
        user=user,
        race=race,
        delivery_method=method,
        **fields,
    )


@pytest.fixture
def order(race, user):
    """Pickup order."""
    return order_for(race, user, 'PEDIDO0001')


@pytest.fixture
def closed_order(closed_race, user):
    """Pickup order for the closed race."""
    return order_for(closed_race, user, 'PEDIDOVELHO')


@pytest.fixture
def home_order(race, user):
    """Home delivery order, label not printed yet."""
    return order_for(
        race, user, 'PEDIDO0002',
        method=DeliveryMethod.HOME,
        delivery_address='Rua das Flores, 123',
        kit_delivery_status=KitDeliveryStatus.PENDING,
    )


def profile(name, document, email=None):
    """Athlete profile as stored on a participant."""
    return {
        'full_name': name,
        'document_type': DocumentType.CPF,
        'document_number': document,
        'email': email or f"{name.split()[0].lower()}@exemplo.com.br",
        'mobile_phone': '11988887777',
        'gender': Gender.FEMALE,
        'birth_date': '1990-05-10',
    }


@pytest.fixture
def make_participant(race, order):
    """
    Factory: make_participant(name=None, modality='5K', status=...).

    A name makes the participant IDENTIFICADA by default; no name leaves
    it PENDENTE_IDENTIFICACAO.
    """
    counter = {'n': 0}

    def factory(name=None, modality='5K', status=None, document=None, email=None,
                order=order, race=race, **fields):
        counter['n'] += 1
        if status is None:
            status = ParticipantStatus.IDENTIFIED if name else ParticipantStatus.PENDING
        user_profile = None
        if name:
            user_profile = profile(name, document or f"{counter['n']:011d}", email)
        return Participant.objects.create(
            race=race,
            order=order,
            user=order.user,
            modality=modality,
            status=status,
            user_profile=user_profile,
            created_at=timezone.now() + timedelta(seconds=counter['n']),
            **fields,
        )

    return factory


@pytest.fixture
def team_member(user):
    """Saved athlete for the buyer."""
    return TeamMember.objects.create(
        owner=user,
        full_name='Ana Lima',
        birth_date=date(1992, 3, 14),
        document_number=CPF_ANA,
        gender=Gender.FEMALE,
        email='ana@exemplo.com.br',
        mobile_phone='11911112222',
        shirt_size='P',
    )


@pytest.fixture
def other_team_member(user):
    """Second saved athlete for the buyer."""
    return TeamMember.objects.create(
        owner=user,
        full_name='Beatriz Costa',
        document_number=CPF_BEATRIZ,
        gender=Gender.FEMALE,
        email='beatriz@exemplo.com.br',
        mobile_phone='11933334444',
        shirt_size='M',
    )
