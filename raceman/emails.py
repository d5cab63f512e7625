"""
Transactional e-mail content.

    subject, html = build_email('identificationPending', {
        'customerName': 'Maria',
        'raceName': 'Corrida da Primavera',
        'pendingCount': 2,
    })

Data keys follow the storefront payload (camelCase). Every value coming
from data is HTML-escaped; only the fixed markup around it is trusted.
"""

from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import format_html

from raceman.adapters.mail import get_email_dispatcher
from raceman.conf import raceman_settings
from raceman.exceptions import RegistrationError

TEMPLATE_NAME = 'raceman/email.html'


def _name(data: dict) -> str:
    return data.get('customerName') or 'Atleta'


def _welcome(data, site):
    return {
        'subject': f"Bem-vindo(a) à {site.SITE_NAME}!",
        'title': 'Sua jornada começa agora!',
        'name': _name(data),
        'main_message': (
            'Sua conta foi criada com sucesso! Estamos felizes em ter você na nossa '
            'comunidade. Agora você pode explorar nossos eventos, gerenciar suas '
            'inscrições e muito mais.'
        ),
        'button_link': f"{site.SITE_URL}/races",
        'button_text': 'Encontrar minha próxima corrida',
    }


def _password_changed(data, site):
    return {
        'subject': '[Segurança] Sua senha foi alterada',
        'title': 'Aviso de Segurança',
        'name': _name(data),
        'main_message': (
            f"Este é um aviso de segurança para informar que a senha da sua conta na "
            f"{site.SITE_NAME} foi alterada com sucesso. Se você não realizou esta "
            f"alteração, entre em contato com nosso suporte imediatamente."
        ),
    }


def _order_confirmation(data, site):
    return {
        'subject': f"Inscrição Confirmada! Pedido #{data.get('orderNumber', '')}",
        'title': 'Pagamento Aprovado!',
        'name': _name(data),
        'main_message': format_html(
            'Seu pagamento foi aprovado e sua inscrição para o evento <strong>{}</strong> '
            'foi confirmada com sucesso! O próximo passo é identificar os atletas para '
            'cada vaga adquirida. Você pode fazer isso a qualquer momento no seu painel.',
            data.get('raceName', ''),
        ),
        'info_block': format_html(
            '<b>Número do Pedido:</b> #{}<br><b>Total de Inscrições:</b> {}',
            data.get('orderNumber') or '-',
            data.get('totalInscriptions') or '-',
        ),
        'button_link': f"{site.SITE_URL}/dashboard/subscriptions",
        'button_text': 'Acessar Minhas Inscrições',
    }


def _payment_pending(data, site):
    return {
        'subject': f"Aguardando pagamento do seu pedido #{data.get('orderNumber', '')}",
        'title': 'Finalize seu pagamento!',
        'name': _name(data),
        'main_message': format_html(
            'Vimos que você gerou um PIX para o pedido <strong>#{}</strong>, mas ainda não '
            'identificamos o pagamento. Não perca sua vaga! Lembre-se que o código PIX '
            'expira em breve. Use o QR Code ou o código copia-e-cola para finalizar.',
            data.get('orderNumber', ''),
        ),
        'info_block': format_html(
            '<p style="font-family:monospace;word-break:break-all;text-align:center;">{}</p>',
            data.get('pixCode') or 'Código PIX não disponível',
        ),
    }


def _payment_failed(data, site):
    return {
        'subject': f"Problema no pagamento do seu pedido #{data.get('orderNumber', '')}",
        'title': 'Pagamento Recusado',
        'name': _name(data),
        'main_message': format_html(
            'Houve um problema ao processar o pagamento do seu pedido <strong>#{}</strong> '
            'para o evento <strong>{}</strong>. Por favor, verifique os dados do seu cartão '
            'ou tente uma nova forma de pagamento para garantir sua vaga.',
            data.get('orderNumber', ''),
            data.get('raceName', ''),
        ),
        'button_link': f"{site.SITE_URL}/cart",
        'button_text': 'Tentar Novamente',
    }


def _kit_shipped(data, site):
    tracking = data.get('trackingCode')
    return {
        'subject': f"Seu kit está a caminho! Pedido #{data.get('orderNumber', '')}",
        'title': 'Kit a Caminho!',
        'name': _name(data),
        'main_message': format_html(
            'Ótima notícia! O kit para sua inscrição no evento <strong>{}</strong> já foi '
            'enviado. Em breve você o receberá no endereço cadastrado.',
            data.get('raceName', ''),
        ),
        'info_block': format_html('<b>Código de Rastreio:</b> {}', tracking) if tracking else '',
    }


def _order_cancelled(data, site):
    return {
        'subject': f"Pedido #{data.get('orderNumber', '')} cancelado",
        'title': 'Inscrição Cancelada',
        'name': _name(data),
        'main_message': format_html(
            'Conforme solicitado, sua inscrição para o evento <strong>{}</strong> '
            '(pedido #{}) foi cancelada. Esperamos ver você em nossos próximos eventos!',
            data.get('raceName', ''),
            data.get('orderNumber', ''),
        ),
        'info_block': data.get('refundInfo') or '',
    }


def _abandoned_cart(data, site):
    return {
        'subject': f"Finalize sua inscrição para {data.get('raceName') or 'a corrida'}",
        'title': 'Você está quase lá!',
        'name': _name(data),
        'main_message': format_html(
            'Notamos que você iniciou o processo de inscrição para <strong>{}</strong>, mas '
            'não finalizou. Não perca a chance de participar deste evento incrível! Restam '
            'poucas vagas. Complete sua inscrição agora mesmo.',
            data.get('raceName', ''),
        ),
        'button_link': data.get('checkoutUrl') or f"{site.SITE_URL}/cart",
        'button_text': 'Finalizar Inscrição',
    }


def _profile_updated(data, site):
    return {
        'subject': '[Segurança] Seus dados foram atualizados',
        'title': 'Seu Perfil Foi Atualizado',
        'name': _name(data),
        'main_message': (
            f"Este é um aviso para confirmar que as informações do seu perfil na "
            f"{site.SITE_NAME} foram atualizadas com sucesso. Se você não realizou esta "
            f"alteração, entre em contato com nosso suporte imediatamente."
        ),
    }


def _contact_confirmation(data, site):
    return {
        'subject': 'Recebemos sua mensagem!',
        'title': 'Contato Recebido',
        'name': _name(data),
        'main_message': (
            'Obrigado por entrar em contato! Recebemos sua mensagem e nossa equipe '
            'responderá o mais breve possível.'
        ),
        'info_block': format_html(
            '<strong>Sua Mensagem:</strong><br/><i>"{}"</i>',
            data.get('message', ''),
        ),
    }


def _identification_pending(data, site):
    return {
        'subject': f"⚠️ Lembrete: Identifique seus atletas para a {data.get('raceName') or 'corrida'}",
        'title': 'Ação Necessária!',
        'name': _name(data),
        'main_message': format_html(
            'Vimos que você tem <strong>{} inscrições pendentes de identificação</strong> '
            'para o evento <strong>{}</strong>. Para garantir a participação de todos, é '
            'essencial que você atribua um atleta a cada vaga adquirida.',
            data.get('pendingCount') or 'algumas',
            data.get('raceName', ''),
        ),
        'button_link': data.get('dashboardUrl') or f"{site.SITE_URL}/dashboard/subscriptions",
        'button_text': 'Identificar Atletas Agora',
    }


def _new_contact_message_admin(data, site):
    return {
        'subject': f"Nova Mensagem Recebida de {data.get('senderName', '')}",
        'title': 'Novo Contato no Site',
        'name': 'Admin',
        'main_message': (
            f"Você recebeu uma nova mensagem através do formulário de contato do "
            f"site {site.SITE_NAME}."
        ),
        'info_block': format_html(
            '<b>De:</b> {} ({})<br><br><b>Mensagem:</b><br>'
            '<p style="white-space: pre-wrap; font-style: italic;">{}</p>',
            data.get('senderName', ''),
            data.get('senderEmail', ''),
            data.get('message', ''),
        ),
        'button_link': f"{site.SITE_URL}/admin/messages",
        'button_text': 'Ver na Caixa de Entrada',
    }


EMAIL_BUILDERS = {
    'welcome': _welcome,
    'passwordChanged': _password_changed,
    'orderConfirmation': _order_confirmation,
    'paymentPending': _payment_pending,
    'paymentFailed': _payment_failed,
    'kitShipped': _kit_shipped,
    'orderCancelled': _order_cancelled,
    'abandonedCart': _abandoned_cart,
    'profileUpdated': _profile_updated,
    'contactConfirmation': _contact_confirmation,
    'identificationPending': _identification_pending,
    'newContactMessageAdmin': _new_contact_message_admin,
}

EMAIL_TYPES = tuple(EMAIL_BUILDERS)


def build_email(email_type: str, data: dict | None = None) -> tuple[str, str]:
    """
    Render subject and HTML body for an e-mail type.

    Raises:
        RegistrationError('INVALID_EMAIL_TYPE'): Unknown type
    """
    builder = EMAIL_BUILDERS.get(email_type)
    if builder is None:
        raise RegistrationError('INVALID_EMAIL_TYPE', type=email_type)

    site = raceman_settings
    context = builder(data or {}, site)
    subject = context.pop('subject')
    context.update({
        'site_name': site.SITE_NAME,
        'logo_url': site.LOGO_URL,
        'year': timezone.now().year,
    })
    return subject, render_to_string(TEMPLATE_NAME, context)


def send_email(to: str, email_type: str, data: dict | None = None) -> None:
    """Build and deliver through the configured dispatcher. Raises on failure."""
    subject, html = build_email(email_type, data)
    get_email_dispatcher().send(to, subject, html)
