# app/download/routes.py

import io
import os
import zipfile

from flask import jsonify, current_app, render_template, send_file
from app.download import bp
from app.services.link_service import obter_registro
from app.services.upload_service import TIPO_PDF


def _recusa_json(validacao):
    return jsonify({"error": validacao.mensagem, "reason": validacao.motivo}), 404


def _tempo_restante(link, agora):
    segundos = max(0, int((link.expira_em - agora).total_seconds()))
    return segundos // 3600, (segundos % 3600) // 60


def _nomes_unicos(arquivos):
    """Nomes para dentro do ZIP; repetidos ganham o primeiro sufixo ' (n)' ainda livre."""
    usados = set()
    for arquivo in arquivos:
        nome = arquivo.nome_original
        raiz, extensao = os.path.splitext(nome)
        n = 0
        while nome in usados:
            n += 1
            nome = f"{raiz} ({n}){extensao}"
        usados.add(nome)
        yield arquivo, nome


@bp.route('/download/<link_id>')
def pagina(link_id):
    """
    Página HTML com os documentos disponíveis de um link temporário.
    """
    registro = obter_registro()
    validacao = registro.validar(link_id)
    if not validacao.valido:
        current_app.logger.info(f"DOWNLOAD: Link {link_id} recusado: {validacao.motivo}")
        return render_template('download/erro.html', motivo=validacao.mensagem), 404

    link = validacao.link
    horas, minutos = _tempo_restante(link, registro.agora())
    return render_template(
        'download/pagina.html',
        link=link,
        horas_restantes=horas,
        minutos_restantes=minutos,
    )


@bp.route('/download/<link_id>/file/<path:filename>')
def baixar_arquivo(link_id, filename):
    registro = obter_registro()
    with registro.reservar(link_id):
        validacao = registro.validar(link_id)
        if not validacao.valido:
            return _recusa_json(validacao)

        arquivo = validacao.link.arquivo(filename)
        if arquivo is None:
            return jsonify({"error": "Arquivo não encontrado"}), 404
        if not os.path.isfile(arquivo.caminho):
            return jsonify({"error": "Arquivo não existe no servidor"}), 404

        # Só conta o download aqui; requisições concorrentes disputam a vaga sob o lock
        validacao = registro.consumir(link_id)
        if not validacao.valido:
            return _recusa_json(validacao)

        try:
            return send_file(
                arquivo.caminho,
                mimetype=TIPO_PDF,
                as_attachment=True,
                download_name=arquivo.nome_original,
            )
        except Exception:
            registro.devolver(link_id)
            raise


@bp.route('/download/<link_id>/zip')
def baixar_zip(link_id):
    """Todos os arquivos do link em um único ZIP, contado como um download."""
    registro = obter_registro()
    with registro.reservar(link_id):
        validacao = registro.validar(link_id)
        if not validacao.valido:
            return _recusa_json(validacao)

        disponiveis = [a for a in validacao.link.arquivos if os.path.isfile(a.caminho)]
        if not disponiveis:
            return jsonify({"error": "Arquivo não existe no servidor"}), 404

        validacao = registro.consumir(link_id)
        if not validacao.valido:
            return _recusa_json(validacao)

        try:
            buffer = io.BytesIO()
            with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as pacote:
                for arquivo, nome in _nomes_unicos(disponiveis):
                    pacote.write(arquivo.caminho, arcname=nome)
            buffer.seek(0)
        except Exception:
            registro.devolver(link_id)
            raise

        current_app.logger.info(f"DOWNLOAD: ZIP com {len(disponiveis)} arquivo(s) gerado para {link_id}")
        return send_file(
            buffer,
            mimetype='application/zip',
            as_attachment=True,
            download_name=f"documentos_{link_id}.zip",
        )
