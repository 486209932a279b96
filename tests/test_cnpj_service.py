import requests

from conftest import RespostaFalsa
from app.models import MOTIVO_TODAS_FONTES_FALHARAM, MOTIVO_VALIDACAO, DadosCNPJ
from app.services.cnpj_service import (
    FONTES,
    FonteCNPJ,
    consultar_cnpj,
    limpar_cnpj,
    normalizar_dados_cnpj,
)

RECEITAWS_OK = {
    'status': 'OK',
    'cnpj': '11.222.333/0001-81',
    'nome': 'EMPRESA RECEITA LTDA',
    'situacao': 'ATIVA',
}


def test_limpar_cnpj():
    assert limpar_cnpj('11.222.333/0001-81') == '11222333000181'
    assert limpar_cnpj(None) == ''


def test_cnpj_com_tamanho_errado_nao_consulta_fontes(app, fontes_cnpj):
    with app.app_context():
        resultado = consultar_cnpj('123.456')
    assert not resultado.sucesso
    assert resultado.motivo == MOTIVO_VALIDACAO
    assert resultado.fonte == 'validacao'
    assert fontes_cnpj.chamadas == []


def test_primeira_fonte_valida_vence(app, fontes_cnpj):
    fontes_cnpj.respostas['brasilapi'] = RespostaFalsa(200, {'razao_social': 'EMPRESA OFICIAL LTDA'})
    fontes_cnpj.respostas['receitaws'] = RespostaFalsa(200, RECEITAWS_OK)
    with app.app_context():
        resultado = consultar_cnpj('11.222.333/0001-81')
    assert resultado.sucesso
    assert resultado.fonte == 'BrasilAPI'
    assert resultado.oficial
    assert resultado.dados.razao_social == 'EMPRESA OFICIAL LTDA'
    assert resultado.consultado_em
    assert len(fontes_cnpj.chamadas) == 1
    assert fontes_cnpj.chamadas[0].endswith('/11222333000181')


def test_fallback_apos_erro_de_rede_e_marcador_de_erro(app, fontes_cnpj):
    fontes_cnpj.respostas['brasilapi'] = requests.exceptions.Timeout('tempo esgotado')
    fontes_cnpj.respostas['receitaws'] = RespostaFalsa(200, {'status': 'ERROR', 'message': 'CNPJ inválido'})
    fontes_cnpj.respostas['cnpj.ws'] = RespostaFalsa(200, {
        'razao_social': 'EMPRESA CNPJWS LTDA',
        'estabelecimento': {'situacao_cadastral': 'Ativa'},
    })
    with app.app_context():
        resultado = consultar_cnpj('11222333000181')
    assert resultado.sucesso
    assert resultado.fonte == 'CNPJ.ws'
    assert not resultado.oficial
    assert resultado.dados.situacao == 'Ativa'
    assert len(fontes_cnpj.chamadas) == 3


def test_dados_incompletos_passam_para_proxima_fonte(app, fontes_cnpj):
    fontes_cnpj.respostas['brasilapi'] = RespostaFalsa(200, {'cnpj': '11222333000181'})
    fontes_cnpj.respostas['receitaws'] = RespostaFalsa(200, RECEITAWS_OK)
    with app.app_context():
        resultado = consultar_cnpj('11222333000181')
    assert resultado.fonte == 'ReceitaWS'
    assert resultado.dados.razao_social == 'EMPRESA RECEITA LTDA'


def test_json_invalido_e_ignorado(app, fontes_cnpj):
    fontes_cnpj.respostas['brasilapi'] = RespostaFalsa(200, ValueError('json inválido'))
    fontes_cnpj.respostas['receitaws'] = RespostaFalsa(200, RECEITAWS_OK)
    with app.app_context():
        resultado = consultar_cnpj('11222333000181')
    assert resultado.fonte == 'ReceitaWS'


def test_todas_as_fontes_falham(app, fontes_cnpj):
    fontes_cnpj.respostas['brasilapi'] = RespostaFalsa(500)
    fontes_cnpj.respostas['receitaws'] = RuntimeError('falha inesperada')
    with app.app_context():
        resultado = consultar_cnpj('11222333000181')
    assert not resultado.sucesso
    assert resultado.motivo == MOTIVO_TODAS_FONTES_FALHARAM
    assert resultado.fonte == 'todas_apis_falharam'
    assert resultado.dados is None
    assert len(fontes_cnpj.chamadas) == 3


def test_nova_fonte_precisa_de_uma_entrada_na_tabela(app, fontes_cnpj):
    def normalizar_espelho(dados):
        return DadosCNPJ(razao_social=dados['empresa'], situacao=dados['status'])

    fontes = FONTES + (FonteCNPJ('Espelho', 'https://espelho.example/cnpj/{cnpj}', False, normalizar_espelho),)
    fontes_cnpj.respostas['espelho.example'] = RespostaFalsa(200, {'empresa': 'EMPRESA ESPELHO LTDA', 'status': 'ATIVA'})

    with app.app_context():
        resultado = consultar_cnpj('11222333000181', fontes=fontes)

    assert resultado.sucesso
    assert resultado.fonte == 'Espelho'
    assert resultado.dados.razao_social == 'EMPRESA ESPELHO LTDA'
    assert normalizar_dados_cnpj({'empresa': 'X', 'status': ''}, 'Espelho', fontes).sucesso
    assert not normalizar_dados_cnpj({'empresa': 'X', 'status': ''}, 'Espelho').sucesso
