"""
Raceman HTTP endpoints.

POST /api/send-email
    {"to": "...", "type": "identificationPending", "data": {...}}
"""

import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from raceman.emails import send_email as deliver_email
from raceman.exceptions import RegistrationError

logger = logging.getLogger('raceman')


@csrf_exempt
@require_POST
def send_email(request):
    try:
        body = json.loads(request.body or b'{}')
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JsonResponse({"error": "JSON inválido."}, status=400)
    if not isinstance(body, dict):
        return JsonResponse({"error": "JSON inválido."}, status=400)

    to = body.get("to")
    email_type = body.get("type")
    if not email_type or not to:
        return JsonResponse(
            {"error": "Os parâmetros 'type' e 'to' são obrigatórios."},
            status=400,
        )

    data = body.get("data") or {}
    if not isinstance(data, dict):
        return JsonResponse({"error": "O campo 'data' deve ser um objeto."}, status=400)

    try:
        deliver_email(to, email_type, data)
    except RegistrationError as e:
        return JsonResponse({"error": "Tipo de e-mail inválido ou não encontrado.", "code": e.code}, status=400)
    except Exception as e:
        logger.warning(
            "raceman.email.failed",
            extra={"to": to, "type": email_type, "error": str(e)},
        )
        return JsonResponse(
            {
                "error": "Ocorreu um erro interno ao tentar enviar o e-mail.",
                "details": str(e),
            },
            status=500,
        )

    logger.info("raceman.email.sent", extra={"to": to, "type": email_type})
    return JsonResponse({"success": True, "message": "E-mail enviado com sucesso."})
