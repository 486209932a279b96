# app/services/normalizacao_service.py
import logging

from app.models import (
    MOTIVO_DADOS_INCOMPLETOS,
    MOTIVO_ERRO_NORMALIZACAO,
    DadosCNPJ,
    Endereco,
    ResultadoConsulta,
    Socio,
)

logger = logging.getLogger(__name__)


def _texto(valor) -> str:
    """Converte qualquer valor vindo da API em string, nunca None."""
    if valor is None:
        return ''
    return str(valor).strip()


def _primeiro(dados: dict, *chaves) -> str:
    """Retorna o primeiro campo preenchido. Chaves com ponto descem em objetos aninhados."""
    for chave in chaves:
        valor = dados
        for parte in chave.split('.'):
            valor = valor.get(parte) if isinstance(valor, dict) else None
        if valor not in (None, ''):
            return _texto(valor)
    return ''


def _lista(dados: dict, chave: str) -> list:
    valor = dados.get(chave)
    return valor if isinstance(valor, list) else []


def _atividade(codigo, descricao) -> str:
    return f"{_texto(codigo)} - {_texto(descricao)}"


def normalizar_brasilapi(dados: dict) -> DadosCNPJ:
    normalizado = DadosCNPJ(
        cnpj=_primeiro(dados, 'cnpj'),
        razao_social=_primeiro(dados, 'razao_social', 'company.name'),
        nome_fantasia=_primeiro(dados, 'nome_fantasia', 'alias'),
        situacao=_primeiro(dados, 'descricao_situacao_cadastral', 'status'),
        data_situacao=_primeiro(dados, 'data_situacao_cadastral'),
        motivo_situacao=_primeiro(dados, 'descricao_motivo_situacao_cadastral'),
        data_abertura=_primeiro(dados, 'data_inicio_atividade', 'founded'),
        natureza_juridica=_primeiro(dados, 'natureza_juridica', 'descricao_natureza_juridica'),
        porte=_primeiro(dados, 'descricao_porte', 'porte', 'size'),
        capital_social=_primeiro(dados, 'capital_social'),
        endereco=Endereco(
            logradouro=_primeiro(dados, 'logradouro'),
            numero=_primeiro(dados, 'numero'),
            complemento=_primeiro(dados, 'complemento'),
            bairro=_primeiro(dados, 'bairro'),
            municipio=_primeiro(dados, 'municipio'),
            uf=_primeiro(dados, 'uf'),
            cep=_primeiro(dados, 'cep'),
        ),
        telefone=_primeiro(dados, 'ddd_telefone_1'),
        email=_primeiro(dados, 'email'),
    )

    # A BrasilAPI publica o CNAE principal em campos planos; versões antigas usavam um objeto
    principal = dados.get('cnae_fiscal_principal')
    if isinstance(principal, dict):
        normalizado.atividade_principal = _atividade(principal.get('codigo'), principal.get('descricao'))
    elif dados.get('cnae_fiscal'):
        normalizado.atividade_principal = _atividade(dados.get('cnae_fiscal'), dados.get('cnae_fiscal_descricao'))

    normalizado.atividades_secundarias = [
        _atividade(cnae.get('codigo'), cnae.get('descricao'))
        for cnae in _lista(dados, 'cnaes_secundarios')
    ]
    normalizado.socios = [
        Socio(
            nome=_texto(socio.get('nome_socio')),
            qualificacao=_texto(socio.get('qualificacao_socio')),
            data_entrada=_texto(socio.get('data_entrada_sociedade')),
        )
        for socio in _lista(dados, 'qsa')
    ]
    return normalizado


def normalizar_receitaws(dados: dict) -> DadosCNPJ:
    normalizado = DadosCNPJ(
        cnpj=_primeiro(dados, 'cnpj'),
        razao_social=_primeiro(dados, 'nome'),
        nome_fantasia=_primeiro(dados, 'fantasia'),
        situacao=_primeiro(dados, 'situacao'),
        data_situacao=_primeiro(dados, 'data_situacao'),
        motivo_situacao=_primeiro(dados, 'motivo_situacao'),
        data_abertura=_primeiro(dados, 'abertura'),
        natureza_juridica=_primeiro(dados, 'natureza_juridica'),
        porte=_primeiro(dados, 'porte'),
        capital_social=_primeiro(dados, 'capital_social'),
        endereco=Endereco(
            logradouro=_primeiro(dados, 'logradouro'),
            numero=_primeiro(dados, 'numero'),
            complemento=_primeiro(dados, 'complemento'),
            bairro=_primeiro(dados, 'bairro'),
            municipio=_primeiro(dados, 'municipio'),
            uf=_primeiro(dados, 'uf'),
            cep=_primeiro(dados, 'cep'),
        ),
        telefone=_primeiro(dados, 'telefone'),
        email=_primeiro(dados, 'email'),
    )

    principais = _lista(dados, 'atividade_principal')
    if principais:
        normalizado.atividade_principal = _atividade(principais[0].get('code'), principais[0].get('text'))

    normalizado.atividades_secundarias = [
        _atividade(ativ.get('code'), ativ.get('text'))
        for ativ in _lista(dados, 'atividades_secundarias')
    ]
    # ReceitaWS não informa a data de entrada dos sócios
    normalizado.socios = [
        Socio(nome=_texto(socio.get('nome')), qualificacao=_texto(socio.get('qual')))
        for socio in _lista(dados, 'qsa')
    ]
    return normalizado


def normalizar_cnpjws(dados: dict) -> DadosCNPJ:
    estabelecimento = dados.get('estabelecimento') or {}
    telefone = ''
    if estabelecimento.get('telefone1'):
        telefone = f"{_texto(estabelecimento.get('ddd1'))}{_texto(estabelecimento.get('telefone1'))}"
    logradouro = ' '.join(
        parte for parte in (
            _primeiro(estabelecimento, 'tipo_logradouro'),
            _primeiro(estabelecimento, 'logradouro'),
        ) if parte
    )

    normalizado = DadosCNPJ(
        cnpj=_primeiro(estabelecimento, 'cnpj'),
        razao_social=_primeiro(dados, 'razao_social'),
        nome_fantasia=_primeiro(estabelecimento, 'nome_fantasia'),
        situacao=_primeiro(estabelecimento, 'situacao_cadastral'),
        data_situacao=_primeiro(estabelecimento, 'data_situacao_cadastral'),
        motivo_situacao=_primeiro(estabelecimento, 'motivo_situacao_cadastral.descricao'),
        data_abertura=_primeiro(estabelecimento, 'data_inicio_atividade'),
        natureza_juridica=_primeiro(dados, 'natureza_juridica.descricao'),
        porte=_primeiro(dados, 'porte.descricao'),
        capital_social=_primeiro(dados, 'capital_social'),
        endereco=Endereco(
            logradouro=logradouro,
            numero=_primeiro(estabelecimento, 'numero'),
            complemento=_primeiro(estabelecimento, 'complemento'),
            bairro=_primeiro(estabelecimento, 'bairro'),
            municipio=_primeiro(estabelecimento, 'cidade.nome'),
            uf=_primeiro(estabelecimento, 'estado.sigla'),
            cep=_primeiro(estabelecimento, 'cep'),
        ),
        telefone=telefone,
        email=_primeiro(estabelecimento, 'email'),
    )

    principal = estabelecimento.get('atividade_principal')
    if isinstance(principal, dict):
        normalizado.atividade_principal = _atividade(principal.get('id'), principal.get('descricao'))

    normalizado.atividades_secundarias = [
        _atividade(ativ.get('id'), ativ.get('descricao'))
        for ativ in _lista(estabelecimento, 'atividades_secundarias')
    ]
    normalizado.socios = [
        Socio(
            nome=_texto(socio.get('nome')),
            qualificacao=_primeiro(socio, 'qualificacao_socio.descricao'),
            data_entrada=_texto(socio.get('data_entrada')),
        )
        for socio in _lista(dados, 'socios')
    ]
    return normalizado


def aplicar_normalizador(dados, normalizador) -> ResultadoConsulta:
    """Executa um normalizador e converte o resultado (ou o erro) em ResultadoConsulta."""
    try:
        normalizado = normalizador(dados)
    except Exception as e:
        logger.error(f"NORMALIZACAO: Erro ao normalizar dados: {e}", exc_info=True)
        return ResultadoConsulta.falha(MOTIVO_ERRO_NORMALIZACAO, 'Erro ao processar dados da API')

    # Validação mínima - deve ter pelo menos razão social
    if not normalizado.razao_social:
        return ResultadoConsulta.falha(MOTIVO_DADOS_INCOMPLETOS, 'Dados incompletos retornados pela API')

    return ResultadoConsulta(sucesso=True, dados=normalizado)
