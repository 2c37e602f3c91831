"""
Serviço de envio de emails usando Resend.

Em desenvolvimento o envio é substituído por log (ConsoleEmailSender).
Envio é best-effort: falhas são logadas e nunca desfazem a operação que o originou.
"""
import html
import logging
from typing import Protocol, Tuple

import resend

from app.config import EmailConfig, Settings

logger = logging.getLogger(__name__)

_ROLE_LABELS = {
    "admin": "Administrador",
    "sindico": "Síndico",
    "morador": "Morador",
}


class EmailSender(Protocol):
    def send(self, to: str, subject: str, html_body: str) -> None: ...


class ConsoleEmailSender:
    """Apenas loga o email (ambiente de desenvolvimento)."""

    def send(self, to: str, subject: str, html_body: str) -> None:
        logger.info(f"[EMAIL] Para: {to}")
        logger.info(f"[EMAIL] Assunto: {subject}")
        logger.info(f"[EMAIL] Corpo:\n{html_body}")


class ResendEmailSender:
    def __init__(self, config: EmailConfig):
        self.config = config

    def send(self, to: str, subject: str, html_body: str) -> None:
        resend.api_key = self.config.resend_api_key
        params = {
            "from": self.config.from_address,
            "to": [to],
            "subject": subject,
            "html": html_body,
        }
        response = resend.Emails.send(params)
        logger.info(f"[EMAIL] Enviado para {to} (id={_response_id(response)})")


def _response_id(response) -> str:
    # Resend retorna dict com 'id' (versões antigas) ou objeto com atributo id
    if isinstance(response, dict):
        return str(response.get("id", ""))
    return str(getattr(response, "id", ""))


def build_email_sender(settings: Settings) -> EmailSender:
    if settings.is_development and not settings.email.resend_api_key:
        return ConsoleEmailSender()
    return ResendEmailSender(settings.email)


def invite_link(config: EmailConfig, token: str) -> str:
    return f"{config.app_base_url}/invites/{token}"


def _get_invite_template_html(
    tenant_name: str,
    inviter_name: str,
    role: str,
    link: str,
) -> str:
    """
    Gera template HTML para email de convite.
    """
    tenant_name = html.escape(tenant_name)
    inviter_name = html.escape(inviter_name)
    role_label = _ROLE_LABELS.get(role, role)
    return f"""
<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <title>Convite - {tenant_name}</title>
</head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin-bottom: 20px;">
        <h1 style="color: #2c3e50; margin-top: 0;">Você foi convidado(a) para o {tenant_name}</h1>
    </div>

    <p><strong>{inviter_name}</strong> convidou você para participar do condomínio
    <strong>{tenant_name}</strong> no Habitta como <strong>{role_label}</strong>.</p>

    <div style="text-align: center; margin: 30px 0;">
        <a href="{link}" style="background-color: #007bff; color: white; padding: 12px 24px; text-decoration: none; border-radius: 5px; display: inline-block; font-weight: bold;">
            Aceitar convite
        </a>
    </div>

    <p>Ou copie e cole este link no seu navegador:</p>
    <p style="word-break: break-all; color: #007bff;">{link}</p>

    <p>O convite expira em 7 dias.</p>

    <div style="border-top: 1px solid #dee2e6; padding-top: 20px; margin-top: 30px; font-size: 12px; color: #6c757d;">
        <p style="margin: 0;">Este é um email automático do Habitta. Por favor, não responda este email.</p>
    </div>
</body>
</html>
    """.strip()


def send_invite_email(
    sender: EmailSender,
    config: EmailConfig,
    *,
    to_email: str,
    tenant_name: str,
    inviter_name: str,
    role: str,
    token: str,
) -> Tuple[bool, str]:
    """
    Envia email de convite (executado como background task após o commit).

    Returns:
        Tupla (success, error_message); error_message vazio em caso de sucesso
    """
    logger.info(f"Iniciando envio de email de convite para {to_email} (condomínio: {tenant_name})")
    subject = f"Convite para o condomínio {tenant_name}"
    body = _get_invite_template_html(
        tenant_name=tenant_name,
        inviter_name=inviter_name,
        role=role,
        link=invite_link(config, token),
    )
    try:
        sender.send(to_email, subject, body)
    except Exception as e:
        logger.error(f"[EMAIL] Falha ao enviar convite para {to_email}: {e}", exc_info=True)
        return False, str(e)
    return True, ""
