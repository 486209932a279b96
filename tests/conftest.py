import io
import os
import sys
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app import create_app, mail
from app.services.link_service import EXTENSAO, RegistroLinks
from config import TestingConfig

CNPJ_VALIDO = '11.222.333/0001-81'


class RelogioFalso:
    def __init__(self, inicio=None):
        self.agora = inicio or datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.agora

    def avancar(self, **delta):
        self.agora += timedelta(**delta)


class RespostaFalsa:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


def pdf(nome='documento.pdf', conteudo=b'%PDF-1.4 conteudo de teste', tipo='application/pdf'):
    return (io.BytesIO(conteudo), nome, tipo)


def formulario_valido(**extras):
    dados = {
        'nomeCompleto': 'Maria da Silva',
        'email': 'maria@empresa.com.br',
        'telefone': '92999887766',
        'empresa': 'Empresa Teste Ltda',
        'cnpj': CNPJ_VALIDO,
        'faturamentoAnual': 'ate-1-milhao',
        'tempoExistencia': '1-3-anos',
        'tipoConsultoria': 'captacao',
        'mensagem': 'Precisamos de apoio para captar recursos.',
    }
    dados.update(extras)
    return dados


@pytest.fixture
def relogio():
    return RelogioFalso()


@pytest.fixture
def app(tmp_path, relogio):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / 'uploads')

    app = create_app(Config)
    app.extensions[EXTENSAO] = RegistroLinks(relogio=relogio)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def registro(app):
    return app.extensions[EXTENSAO]


@pytest.fixture
def outbox(app):
    with mail.record_messages() as enviados:
        yield enviados


@pytest.fixture
def fontes_cnpj(monkeypatch):
    """
    Substitui requests.get nas consultas de CNPJ.
    Cada chave de 'respostas' é um trecho da URL; sem correspondência a fonte responde 404.
    """
    estado = SimpleNamespace(respostas={}, chamadas=[])

    def fake_get(url, headers=None, timeout=None):
        estado.chamadas.append(url)
        for trecho, resposta in estado.respostas.items():
            if trecho in url:
                if isinstance(resposta, Exception):
                    raise resposta
                return resposta
        return RespostaFalsa(404)

    monkeypatch.setattr('app.services.cnpj_service.requests.get', fake_get)
    return estado


def arquivos_em(pasta):
    if not os.path.isdir(pasta):
        return []
    return sorted(os.listdir(pasta))
