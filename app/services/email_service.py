# app/services/email_service.py
from datetime import datetime

from flask import current_app, render_template
from flask_mail import Message

from app import mail
from app.services.upload_service import TIPO_PDF


class DestinatarioNaoConfigurado(Exception):
    pass


def _destinatario():
    destinatario = current_app.config.get('RECIPIENT_EMAIL')
    if not destinatario:
        raise DestinatarioNaoConfigurado('RECIPIENT_EMAIL não configurado no servidor.')
    return destinatario


def assunto_consultoria(solicitacao, resultado_cnpj=None) -> str:
    sufixo = ''
    if resultado_cnpj is not None and resultado_cnpj.sucesso and resultado_cnpj.dados.situacao:
        sufixo = f" - {resultado_cnpj.dados.situacao}"
    return f"Nova Solicitação de Consultoria - {solicitacao.empresa}{sufixo}"


def montar_email_consultoria(solicitacao, resultado_cnpj=None, anexos=()) -> Message:
    """Monta o e-mail da equipe com os dados do formulário, do CNPJ e os anexos."""
    msg = Message(
        assunto_consultoria(solicitacao, resultado_cnpj),
        recipients=[_destinatario()],
        html=render_template(
            'email/consultoria.html',
            solicitacao=solicitacao,
            consulta=resultado_cnpj,
            enviado_em=datetime.now(),
        ),
        sender=current_app.config.get('MAIL_DEFAULT_SENDER'),
    )
    for anexo in anexos:
        with open(anexo.caminho, 'rb') as fp:
            msg.attach(anexo.nome_original, TIPO_PDF, fp.read())
    return msg


def montar_email_aporte(solicitacao, resultado_cnpj=None) -> Message:
    return Message(
        f"🚀 Nova Solicitação de Aporte - {solicitacao.empresa or solicitacao.nome}",
        recipients=[_destinatario()],
        html=render_template(
            'email/aporte.html',
            solicitacao=solicitacao,
            consulta=resultado_cnpj,
            enviado_em=datetime.now(),
        ),
        sender=('Aporte Capital', current_app.config.get('MAIL_USERNAME')),
    )


def enviar(msg: Message):
    current_app.logger.info(f"EMAIL_SERVICE: Enviando '{msg.subject}' para {', '.join(msg.recipients)}")
    mail.send(msg)
