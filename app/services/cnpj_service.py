# app/services/cnpj_service.py
import re
from collections import namedtuple
from datetime import datetime, timezone

import requests
from flask import current_app

from app.models import MOTIVO_TODAS_FONTES_FALHARAM, MOTIVO_VALIDACAO, DadosCNPJ, ResultadoConsulta
from app.services.normalizacao_service import (
    aplicar_normalizador,
    normalizar_brasilapi,
    normalizar_cnpjws,
    normalizar_receitaws,
)

FonteCNPJ = namedtuple('FonteCNPJ', ['nome', 'url', 'oficial', 'normalizador'])

# Ordem de prioridade: a fonte oficial primeiro, espelhos de terceiros como fallback
FONTES = (
    FonteCNPJ('BrasilAPI', 'https://brasilapi.com.br/api/cnpj/v1/{cnpj}', True, normalizar_brasilapi),
    FonteCNPJ('ReceitaWS', 'https://www.receitaws.com.br/v1/cnpj/{cnpj}', False, normalizar_receitaws),
    FonteCNPJ('CNPJ.ws', 'https://publica.cnpj.ws/cnpj/{cnpj}', False, normalizar_cnpjws),
)

DIGITOS_CNPJ = 14


def normalizar_dados_cnpj(dados, nome_fonte: str, fontes=FONTES) -> ResultadoConsulta:
    """
    Normaliza a resposta de uma fonte da tabela para o formato DadosCNPJ.
    Fontes fora da tabela produzem um registro vazio e, portanto, dados incompletos.
    """
    normalizador = next((f.normalizador for f in fontes if f.nome == nome_fonte), None)
    return aplicar_normalizador(dados, normalizador or (lambda _dados: DadosCNPJ()))


def limpar_cnpj(cnpj: str) -> str:
    """Remove pontos, barras, hífens e qualquer outro caractere não numérico."""
    return re.sub(r'\D', '', cnpj or '')


def _agora_iso():
    return datetime.now(timezone.utc).isoformat()


def _consultar_fonte(fonte: FonteCNPJ, cnpj_limpo: str):
    """Busca o payload bruto de uma fonte. Retorna None quando a fonte deve ser ignorada."""
    logger = current_app.logger
    response = requests.get(
        fonte.url.format(cnpj=cnpj_limpo),
        headers={
            'User-Agent': current_app.config.get('CNPJ_USER_AGENT', 'AporteCapital/1.0'),
            'Accept': 'application/json',
        },
        timeout=current_app.config.get('CNPJ_TIMEOUT', 10),
    )

    if not response.ok:
        logger.info(f"CNPJ_SERVICE: API {fonte.nome} retornou status: {response.status_code}")
        return None

    dados = response.json()

    # ReceitaWS responde 200 com {"status": "ERROR"} para CNPJs inexistentes
    if not dados or (isinstance(dados, dict) and dados.get('status') == 'ERROR'):
        logger.info(f"CNPJ_SERVICE: API {fonte.nome} retornou erro: {dados}")
        return None

    return dados


def consultar_cnpj(cnpj: str, fontes=FONTES) -> ResultadoConsulta:
    """
    Consulta dados oficiais do CNPJ usando múltiplas APIs.
    As fontes são tentadas em ordem e a primeira resposta completa é devolvida.
    """
    logger = current_app.logger
    cnpj_limpo = limpar_cnpj(cnpj)

    logger.info(f"CNPJ_SERVICE: Consultando CNPJ: {cnpj_limpo}")

    if len(cnpj_limpo) != DIGITOS_CNPJ:
        return ResultadoConsulta.falha(
            MOTIVO_VALIDACAO,
            f'CNPJ deve ter {DIGITOS_CNPJ} dígitos',
            fonte='validacao',
        )

    for fonte in fontes:
        try:
            logger.info(f"CNPJ_SERVICE: Tentando API: {fonte.nome}")
            dados = _consultar_fonte(fonte, cnpj_limpo)
        except requests.exceptions.RequestException as e:
            logger.warning(f"CNPJ_SERVICE: Falha de comunicação com {fonte.nome}: {e}")
            continue
        except ValueError as e:
            logger.warning(f"CNPJ_SERVICE: Resposta inválida de {fonte.nome}: {e}")
            continue
        except Exception as e:
            logger.error(f"CNPJ_SERVICE: Erro inesperado na API {fonte.nome}: {e}", exc_info=True)
            continue

        if dados is None:
            continue

        resultado = normalizar_dados_cnpj(dados, fonte.nome, fontes)
        if resultado.sucesso:
            logger.info(f"CNPJ_SERVICE: Dados obtidos com sucesso via {fonte.nome}")
            resultado.fonte = fonte.nome
            resultado.oficial = fonte.oficial
            resultado.consultado_em = _agora_iso()
            return resultado

        logger.info(f"CNPJ_SERVICE: API {fonte.nome} descartada: {resultado.erro}")

    # Se chegou aqui, nenhuma API funcionou
    return ResultadoConsulta.falha(
        MOTIVO_TODAS_FONTES_FALHARAM,
        'Não foi possível consultar o CNPJ no momento. Todas as APIs estão indisponíveis.',
        fonte='todas_apis_falharam',
        consultado_em=_agora_iso(),
    )
