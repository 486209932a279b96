# app/consultoria/forms.py
import re
from dataclasses import dataclass

from app.services.cnpj_service import DIGITOS_CNPJ, limpar_cnpj

EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def _campo(dados, nome) -> str:
    valor = dados.get(nome)
    return '' if valor is None else str(valor).strip()


@dataclass
class SolicitacaoConsultoria:
    nome_completo: str
    email: str
    telefone: str
    empresa: str
    cnpj: str
    faturamento_anual: str
    tempo_existencia: str
    tipo_consultoria: str
    mensagem: str
    outros_documentos: str = ''

    @classmethod
    def from_form(cls, dados):
        """
        Converte os campos do formulário e reúne todos os problemas encontrados.
        Retorna (solicitacao, erros); a solicitação só é usável com a lista vazia.
        """
        solicitacao = cls(
            nome_completo=_campo(dados, 'nomeCompleto'),
            email=_campo(dados, 'email'),
            telefone=_campo(dados, 'telefone'),
            empresa=_campo(dados, 'empresa'),
            cnpj=_campo(dados, 'cnpj'),
            faturamento_anual=_campo(dados, 'faturamentoAnual'),
            tempo_existencia=_campo(dados, 'tempoExistencia'),
            tipo_consultoria=_campo(dados, 'tipoConsultoria'),
            mensagem=_campo(dados, 'mensagem'),
            outros_documentos=_campo(dados, 'outrosDocumentos'),
        )
        return solicitacao, solicitacao.validar()

    def validar(self):
        erros = []

        # Validação de informações pessoais
        if len(self.nome_completo) < 2:
            erros.append('Nome completo é obrigatório e deve ter pelo menos 2 caracteres')
        if not EMAIL_REGEX.match(self.email):
            erros.append('Email válido é obrigatório')
        if len(self.telefone) < 10:
            erros.append('Telefone válido é obrigatório')
        if len(self.empresa) < 2:
            erros.append('Nome da empresa é obrigatório')

        # Validação de dados empresariais
        if len(self.cnpj) < DIGITOS_CNPJ:
            erros.append('CNPJ é obrigatório e deve ser válido')
        elif len(limpar_cnpj(self.cnpj)) != DIGITOS_CNPJ:
            erros.append(f'CNPJ deve conter {DIGITOS_CNPJ} dígitos')
        if not self.tempo_existencia:
            erros.append('Tempo de existência da empresa é obrigatório')
        if not self.faturamento_anual:
            erros.append('Faturamento anual é obrigatório')

        # Validação de consultoria
        if not self.tipo_consultoria:
            erros.append('Tipo de consultoria é obrigatório')
        if len(self.mensagem) < 5:
            erros.append('Descrição do projeto é obrigatória e deve ter pelo menos 5 caracteres')

        return erros


@dataclass
class SolicitacaoAporte:
    nome: str
    email: str
    telefone: str
    empresa: str = ''
    cnpj: str = ''
    valor_aporte: str = ''
    descricao: str = ''

    @classmethod
    def from_form(cls, dados):
        solicitacao = cls(
            nome=_campo(dados, 'nome'),
            email=_campo(dados, 'email'),
            telefone=_campo(dados, 'telefone'),
            empresa=_campo(dados, 'empresa'),
            cnpj=_campo(dados, 'cnpj'),
            valor_aporte=_campo(dados, 'valorAporte'),
            descricao=_campo(dados, 'descricao'),
        )
        erros = []
        if not (solicitacao.nome and solicitacao.email and solicitacao.telefone):
            erros.append('Nome, email e telefone são obrigatórios')
        return solicitacao, erros
