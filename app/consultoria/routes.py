# app/consultoria/routes.py

from flask import request, jsonify, current_app
from app.consultoria import bp
from app.consultoria.forms import SolicitacaoAporte, SolicitacaoConsultoria
from app.decorators import receber_anexos_pdf
from app.services import consultoria_service
from app.services.upload_service import remover_arquivos


def _erro_interno(e, mensagem="Erro interno do servidor. Tente novamente mais tarde."):
    resposta = {
        "success": False,
        "message": mensagem,
    }
    if current_app.config.get('APP_ENV') == 'development':
        resposta["error"] = str(e)
    return jsonify(resposta), 500


@bp.route('/api/consultoria', methods=['POST'])
@receber_anexos_pdf
def solicitar_consultoria(anexos):
    """
    Recebe o formulário de consultoria com até 5 PDFs em 'documentos'.
    """
    logger = current_app.logger
    logger.info(f"CONSULTORIA: Recebendo solicitação com {len(anexos)} anexo(s)")

    try:
        solicitacao, erros = SolicitacaoConsultoria.from_form(request.form)
        if erros:
            remover_arquivos(anexos)
            logger.warning(f"CONSULTORIA: Dados inválidos: {erros}")
            return jsonify({"success": False, "message": "Dados inválidos", "errors": erros}), 400

        resposta = consultoria_service.processar_consultoria(solicitacao, anexos)
        return jsonify(resposta), 200
    except Exception as e:
        logger.error(f"CONSULTORIA: Erro ao processar solicitação: {e}", exc_info=True)
        remover_arquivos(anexos)
        return _erro_interno(e)


@bp.route('/api/send-email', methods=['POST'])
def enviar_email_aporte():
    """
    Solicitação de aporte sem anexos, enviada em JSON ou formulário.
    """
    logger = current_app.logger
    dados = request.get_json(silent=True) if request.is_json else request.form
    solicitacao, erros = SolicitacaoAporte.from_form(dados or {})
    if erros:
        return jsonify({"success": False, "message": erros[0]}), 400

    try:
        return jsonify(consultoria_service.processar_aporte(solicitacao)), 200
    except Exception as e:
        logger.error(f"CONSULTORIA: Erro ao enviar e-mail: {e}", exc_info=True)
        return _erro_interno(e, "Erro interno do servidor")
