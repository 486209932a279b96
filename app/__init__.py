# app/__init__.py

import os
from datetime import datetime, timezone

from flask import Flask, jsonify
from flask_cors import CORS
from flask_mail import Mail
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from config import Config

mail = Mail()


def _registrar_erros(app):
    @app.errorhandler(404)
    def rota_nao_encontrada(e):
        return jsonify({"success": False, "message": "Rota não encontrada"}), 404

    @app.errorhandler(405)
    def metodo_nao_permitido(e):
        return jsonify({"success": False, "message": "Método não permitido"}), 405

    @app.errorhandler(RequestEntityTooLarge)
    def requisicao_muito_grande(e):
        limite_mb = app.config['MAX_TAMANHO_ARQUIVO'] // (1024 * 1024)
        return jsonify({
            "success": False,
            "message": f"Arquivo muito grande. Tamanho máximo: {limite_mb}MB",
        }), 413

    @app.errorhandler(Exception)
    def erro_inesperado(e):
        if isinstance(e, HTTPException):
            return e
        app.logger.error(f"APP: Erro não tratado: {e}", exc_info=True)
        resposta = {"success": False, "message": "Erro interno do servidor"}
        if app.config.get('APP_ENV') == 'development':
            resposta["error"] = str(e)
        return jsonify(resposta), 500


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    mail.init_app(app)
    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    os.makedirs(app.config['UPLOAD_FOLDER'], exist_ok=True)

    # --- LINKS TEMPORÁRIOS ---
    from app.services.link_service import EXTENSAO, LimpezaPeriodica, RegistroLinks
    registro = RegistroLinks()
    app.extensions[EXTENSAO] = registro
    if app.config.get('LIMPEZA_AUTOMATICA'):
        LimpezaPeriodica(registro, app.config['LIMPEZA_INTERVALO_SEGUNDOS']).iniciar()

    # --- REGISTRO DOS BLUEPRINTS ---
    from app.consultoria import bp as consultoria_bp
    app.register_blueprint(consultoria_bp)
    from app.download import bp as download_bp
    app.register_blueprint(download_bp)

    @app.template_filter('data_br')
    def data_br(valor):
        return valor.strftime('%d/%m/%Y %H:%M:%S') if valor else ''

    @app.template_filter('tamanho_mb')
    def tamanho_mb(valor):
        return f"{valor / 1024 / 1024:.2f} MB"

    @app.route('/api/health')
    def health():
        return jsonify({
            "status": "ok",
            "message": "Servidor funcionando corretamente",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    _registrar_erros(app)

    app.logger.info(f"APP: Aplicação iniciada em modo {app.config.get('APP_ENV')}")
    return app
