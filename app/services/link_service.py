# app/services/link_service.py
"""
Links temporários de download.

Cada link dá acesso a um conjunto de arquivos enviados por tempo limitado e com
número máximo de downloads. A tabela vive apenas na memória do processo.

Concorrência: todas as alterações na tabela passam pelo mesmo lock. As rotas de
download envolvem o trabalho em ``reservar()``; a limpeza periódica ignora links
reservados, então um arquivo nunca é apagado entre a validação do link e a
abertura do arquivo para envio. Depois de aberto, o envio não é afetado pela
remoção do arquivo no disco. A vaga de download é tomada por ``consumir()``, que
valida e incrementa o contador na mesma seção crítica.
"""
import logging
import secrets
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

from flask import current_app

from app.models import (
    LINK_ESGOTADO,
    LINK_EXPIRADO,
    LINK_INATIVO,
    LINK_NAO_ENCONTRADO,
    LinkTemporario,
    ValidacaoLink,
)
from app.services.upload_service import remover_arquivos

logger = logging.getLogger(__name__)

EXTENSAO = 'links_temporarios'


def _agora_utc():
    return datetime.now(timezone.utc)


class RegistroLinks:
    def __init__(self, relogio=_agora_utc):
        self._relogio = relogio
        self._links = {}
        # Todo id já emitido, inclusive de links removidos, para nunca reaproveitar
        self._emitidos = set()
        self._lock = threading.Lock()

    def agora(self) -> datetime:
        return self._relogio()

    def _novo_id(self) -> str:
        while True:
            link_id = secrets.token_hex(8).upper()
            if link_id not in self._emitidos:
                return link_id

    def criar(self, arquivos, max_downloads=5, validade_horas=48) -> str:
        """Gera um link temporário único para download de arquivos."""
        agora = self._relogio()
        with self._lock:
            link_id = self._novo_id()
            self._emitidos.add(link_id)
            self._links[link_id] = LinkTemporario(
                id=link_id,
                arquivos=tuple(arquivos or ()),
                criado_em=agora,
                expira_em=agora + timedelta(hours=validade_horas),
                max_downloads=max_downloads,
            )
        logger.info(f"LINKS: Link temporário criado: {link_id} - Expira em: {agora + timedelta(hours=validade_horas):%d/%m/%Y %H:%M}")
        return link_id

    def obter(self, link_id):
        """Acesso direto ao registro, sem validação. Para diagnóstico (flask shell) e testes."""
        return self._links.get(link_id)

    def _validar(self, link_id) -> ValidacaoLink:
        # Chamar somente com o lock adquirido
        link = self._links.get(link_id)
        if link is None:
            return ValidacaoLink(False, motivo=LINK_NAO_ENCONTRADO)
        if not link.ativo:
            return ValidacaoLink(False, motivo=LINK_INATIVO)
        if link.expirado(self._relogio()):
            link.desativar()
            return ValidacaoLink(False, motivo=LINK_EXPIRADO)
        if link.esgotado:
            link.desativar()
            return ValidacaoLink(False, motivo=LINK_ESGOTADO)
        return ValidacaoLink(True, link=link)

    def validar(self, link_id) -> ValidacaoLink:
        """Valida se um link ainda pode ser usado, desativando-o se expirou ou esgotou."""
        with self._lock:
            return self._validar(link_id)

    def consumir(self, link_id) -> ValidacaoLink:
        """
        Valida o link e já conta o download na mesma seção crítica.
        Duas requisições simultâneas nunca disputam a mesma vaga.
        """
        with self._lock:
            validacao = self._validar(link_id)
            if validacao.valido:
                validacao.link.downloads += 1
                downloads, maximo = validacao.link.downloads, validacao.link.max_downloads
        if validacao.valido:
            logger.info(f"LINKS: Download {downloads}/{maximo} para link {link_id}")
        return validacao

    def devolver(self, link_id):
        """Desfaz um consumir() cujo envio não chegou a acontecer."""
        with self._lock:
            link = self._links.get(link_id)
            if link is not None and link.downloads > 0:
                link.downloads -= 1

    def registrar_download(self, link_id):
        """Conta um download sem validar. As rotas usam consumir(), que valida e conta juntos."""
        with self._lock:
            link = self._links.get(link_id)
            if link is None:
                return
            link.downloads += 1
            downloads, maximo = link.downloads, link.max_downloads
        logger.info(f"LINKS: Download {downloads}/{maximo} para link {link_id}")

    def desativar(self, link_id):
        with self._lock:
            link = self._links.get(link_id)
            if link is not None:
                link.desativar()

    @contextmanager
    def reservar(self, link_id):
        """Marca o link como em uso enquanto um download é preparado."""
        with self._lock:
            link = self._links.get(link_id)
            if link is not None:
                link.em_uso += 1
        try:
            yield
        finally:
            if link is not None:
                with self._lock:
                    link.em_uso -= 1

    def limpar(self) -> int:
        """Remove links expirados ou desativados junto com seus arquivos."""
        agora = self._relogio()
        removidos = []
        with self._lock:
            for link_id, link in list(self._links.items()):
                if link.em_uso:
                    continue
                if link.expirado(agora) or not link.ativo:
                    removidos.append(self._links.pop(link_id))

        # Fora do lock: as entradas já saíram da tabela, ninguém mais apaga esses arquivos
        for link in removidos:
            remover_arquivos(link.arquivos)

        if removidos:
            logger.info(f"LINKS: {len(removidos)} links temporários expirados foram removidos")
        return len(removidos)

    def __len__(self):
        return len(self._links)

    def __contains__(self, link_id):
        return link_id in self._links


def obter_registro() -> RegistroLinks:
    return current_app.extensions[EXTENSAO]


class LimpezaPeriodica:
    """Thread daemon que executa RegistroLinks.limpar() em intervalo fixo."""

    def __init__(self, registro: RegistroLinks, intervalo_segundos: int):
        self.registro = registro
        self.intervalo = intervalo_segundos
        self._parar = threading.Event()
        self._thread = None

    def _loop(self):
        while not self._parar.wait(self.intervalo):
            try:
                self.registro.limpar()
            except Exception:
                logger.exception("LINKS: Erro na limpeza periódica de links")

    def iniciar(self):
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._loop, name='limpeza-links', daemon=True)
        self._thread.start()
        logger.info(f"LINKS: Limpeza periódica iniciada a cada {self.intervalo}s")

    def parar(self):
        self._parar.set()
