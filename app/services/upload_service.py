# app/services/upload_service.py
import logging
import os
import time
import uuid

from werkzeug.utils import secure_filename

from app.models import ArquivoEnviado

logger = logging.getLogger(__name__)

TIPO_PDF = 'application/pdf'


class AnexoInvalido(Exception):
    """Anexo recusado antes de chegar à rota (quantidade, tipo ou tamanho)."""


def tamanho_arquivo(arquivo) -> int:
    """Mede um FileStorage sem consumir o conteúdo."""
    stream = arquivo.stream
    posicao = stream.tell()
    stream.seek(0, os.SEEK_END)
    tamanho = stream.tell()
    stream.seek(posicao)
    return tamanho


def validar_anexos(arquivos, maximo: int, tamanho_maximo: int):
    if len(arquivos) > maximo:
        raise AnexoInvalido(f'Muitos arquivos. Máximo: {maximo} arquivos')
    for arquivo in arquivos:
        if arquivo.mimetype != TIPO_PDF:
            raise AnexoInvalido('Apenas arquivos PDF são permitidos')
        if tamanho_arquivo(arquivo) > tamanho_maximo:
            raise AnexoInvalido(f'Arquivo muito grande. Tamanho máximo: {tamanho_maximo // (1024 * 1024)}MB')


def salvar_anexos(arquivos, pasta: str):
    """Grava os anexos em disco e devolve os descritores na mesma ordem."""
    os.makedirs(pasta, exist_ok=True)
    salvos = []
    try:
        for arquivo in arquivos:
            nome_original = arquivo.filename or 'documento.pdf'
            nome_seguro = secure_filename(nome_original) or 'documento.pdf'
            nome_destino = f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{nome_seguro}"
            caminho = os.path.join(pasta, nome_destino)
            arquivo.stream.seek(0)
            arquivo.save(caminho)
            salvos.append(ArquivoEnviado(nome_original, caminho, os.path.getsize(caminho)))
    except OSError:
        remover_arquivos(salvos)
        raise
    return salvos


def remover_arquivos(arquivos):
    """Remove arquivos temporários. Arquivo já ausente não é erro."""
    for arquivo in arquivos or ():
        try:
            os.remove(arquivo.caminho)
            logger.info(f"UPLOAD: Arquivo removido: {arquivo.caminho}")
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.error(f"UPLOAD: Erro ao remover arquivo {arquivo.caminho}: {e}")
