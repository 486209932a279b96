# app/decorators.py
from functools import wraps
from flask import request, jsonify, current_app
from app.services.upload_service import AnexoInvalido, salvar_anexos, validar_anexos


def receber_anexos_pdf(f):
    """
    Valida e grava os PDFs do campo de anexos antes da rota executar.
    A rota recebe os descritores gravados no argumento 'anexos'.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        config = current_app.config
        # Navegadores enviam uma parte vazia quando nenhum arquivo é escolhido
        arquivos = [a for a in request.files.getlist(config['CAMPO_ANEXOS']) if a and a.filename]

        try:
            validar_anexos(arquivos, config['MAX_ARQUIVOS'], config['MAX_TAMANHO_ARQUIVO'])
        except AnexoInvalido as e:
            current_app.logger.warning(f"UPLOAD: Anexos recusados: {e}")
            return jsonify({"success": False, "message": str(e)}), 400

        try:
            kwargs['anexos'] = salvar_anexos(arquivos, config['UPLOAD_FOLDER'])
        except OSError as e:
            current_app.logger.error(f"UPLOAD: Falha ao gravar anexos: {e}", exc_info=True)
            return jsonify({"success": False, "message": "Erro interno do servidor"}), 500

        return f(*args, **kwargs)
    return decorated_function
