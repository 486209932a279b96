# app/services/consultoria_service.py
from datetime import datetime, timezone

from flask import current_app, url_for

from app.models import MOTIVO_ERRO_INTERNO, ResultadoConsulta
from app.services import cnpj_service, email_service, whatsapp_service
from app.services.link_service import obter_registro
from app.services.upload_service import remover_arquivos
from app.urls import url_externa


def enriquecer_cnpj(cnpj: str):
    """Consulta o CNPJ informado. Falhas nunca interrompem o envio da solicitação."""
    logger = current_app.logger
    if not cnpj:
        return None

    logger.info("CONSULTORIA: Iniciando consulta do CNPJ...")
    try:
        resultado = cnpj_service.consultar_cnpj(cnpj)
    except Exception as e:
        logger.error(f"CONSULTORIA: Erro ao consultar CNPJ: {e}", exc_info=True)
        return ResultadoConsulta.falha(
            MOTIVO_ERRO_INTERNO,
            'Erro interno na consulta do CNPJ',
            fonte='erro_interno',
            consultado_em=datetime.now(timezone.utc).isoformat(),
        )

    if resultado.sucesso:
        logger.info(f"CONSULTORIA: CNPJ consultado com sucesso: {resultado.dados.razao_social}")
    else:
        logger.warning(f"CONSULTORIA: Erro na consulta do CNPJ: {resultado.erro}")
    return resultado


def _criar_link(anexos):
    logger = current_app.logger
    config = current_app.config
    try:
        return obter_registro().criar(
            anexos,
            max_downloads=config['LINK_MAX_DOWNLOADS'],
            validade_horas=config['LINK_VALIDADE_HORAS'],
        )
    except Exception as e:
        logger.error(f"CONSULTORIA: Não foi possível criar o link temporário: {e}", exc_info=True)
        return None


def processar_consultoria(solicitacao, anexos):
    """
    Orquestra o fluxo completo de uma solicitação de consultoria válida:
    consulta do CNPJ, e-mail para a equipe, link temporário e links do WhatsApp.
    """
    logger = current_app.logger
    config = current_app.config

    # Etapa 1: Enriquecimento com dados oficiais
    resultado_cnpj = enriquecer_cnpj(solicitacao.cnpj)

    # Etapa 2: E-mail com os anexos. Sem e-mail não há motivo para manter os arquivos.
    try:
        email_service.enviar(email_service.montar_email_consultoria(solicitacao, resultado_cnpj, anexos))
    except Exception:
        remover_arquivos(anexos)
        raise
    logger.info("CONSULTORIA: Email enviado com sucesso!")

    # Etapa 3: Link temporário. Os arquivos só ficam em disco se houver link.
    link_id = _criar_link(anexos) if anexos else None
    if not link_id:
        remover_arquivos(anexos)

    try:
        url_download = url_externa(url_for('download.pagina', link_id=link_id)) if link_id else None
        if url_download:
            logger.info(f"CONSULTORIA: Link de download disponível: {url_download}")

        # Etapa 4: Mensagens do WhatsApp (cliente sem link, equipe com link)
        numero = config['WHATSAPP_NUMBER']
        url_cliente = whatsapp_service.gerar_url_whatsapp(
            numero, whatsapp_service.mensagem_para_cliente(solicitacao, anexos)
        )
        url_empresa = whatsapp_service.gerar_url_whatsapp(
            numero,
            whatsapp_service.mensagem_para_empresa(
                solicitacao,
                url_download,
                anexos,
                validade_horas=config['LINK_VALIDADE_HORAS'],
                max_downloads=config['LINK_MAX_DOWNLOADS'],
            ),
        )
    except Exception:
        # Ninguém recebeu o link; a limpeza periódica recolhe a entrada desativada
        if link_id:
            obter_registro().desativar(link_id)
        raise

    return {
        "success": True,
        "message": "Solicitação enviada com sucesso! Entraremos em contato em breve.",
        "whatsappURL": url_cliente,
        "whatsappURLForCompany": url_empresa,
        "downloadLink": url_download,
        "hasFiles": bool(anexos),
    }


def processar_aporte(solicitacao):
    """Fluxo sem anexos: consulta do CNPJ (se informado) e e-mail para a equipe."""
    resultado_cnpj = enriquecer_cnpj(solicitacao.cnpj)
    email_service.enviar(email_service.montar_email_aporte(solicitacao, resultado_cnpj))
    return {"success": True, "message": "E-mail enviado com sucesso!"}
