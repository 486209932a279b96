# app/models.py

import os
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import List, Optional, Tuple

# Motivos de falha da consulta de CNPJ
MOTIVO_VALIDACAO = 'validation'
MOTIVO_DADOS_INCOMPLETOS = 'incomplete_data'
MOTIVO_ERRO_NORMALIZACAO = 'normalization_error'
MOTIVO_TODAS_FONTES_FALHARAM = 'all_sources_failed'
MOTIVO_ERRO_INTERNO = 'internal_error'

# Motivos de recusa de um link temporário
LINK_NAO_ENCONTRADO = 'not_found'
LINK_INATIVO = 'inactive'
LINK_EXPIRADO = 'expired'
LINK_ESGOTADO = 'exhausted'

MENSAGENS_LINK = {
    LINK_NAO_ENCONTRADO: 'Link não encontrado',
    LINK_INATIVO: 'Link desativado',
    LINK_EXPIRADO: 'Link expirado',
    LINK_ESGOTADO: 'Limite de downloads atingido',
}


@dataclass(frozen=True)
class ArquivoEnviado:
    nome_original: str
    caminho: str
    tamanho: int

    @property
    def nome_armazenado(self) -> str:
        """Nome único gravado em disco; distingue anexos com o mesmo nome original."""
        return os.path.basename(self.caminho)


@dataclass
class LinkTemporario:
    id: str
    arquivos: Tuple[ArquivoEnviado, ...]
    criado_em: datetime
    expira_em: datetime
    max_downloads: int
    downloads: int = 0
    ativo: bool = True
    # Downloads em andamento; a limpeza periódica não remove links em uso
    em_uso: int = 0

    def expirado(self, agora: datetime) -> bool:
        return agora >= self.expira_em

    @property
    def esgotado(self) -> bool:
        return self.downloads >= self.max_downloads

    def desativar(self):
        self.ativo = False

    def arquivo(self, nome: str) -> Optional[ArquivoEnviado]:
        """Procura pelo nome armazenado e, na falta dele, pelo primeiro nome original igual."""
        for arquivo in self.arquivos:
            if arquivo.nome_armazenado == nome:
                return arquivo
        for arquivo in self.arquivos:
            if arquivo.nome_original == nome:
                return arquivo
        return None

    def __repr__(self):
        return f'<LinkTemporario {self.id} [{self.downloads}/{self.max_downloads}] ativo={self.ativo}>'


@dataclass
class ValidacaoLink:
    valido: bool
    link: Optional[LinkTemporario] = None
    motivo: Optional[str] = None

    @property
    def mensagem(self) -> str:
        return MENSAGENS_LINK.get(self.motivo, '')


@dataclass
class Endereco:
    logradouro: str = ''
    numero: str = ''
    complemento: str = ''
    bairro: str = ''
    municipio: str = ''
    uf: str = ''
    cep: str = ''


@dataclass
class Socio:
    nome: str = ''
    qualificacao: str = ''
    data_entrada: str = ''


@dataclass
class DadosCNPJ:
    """Registro cadastral de uma empresa no formato comum a todas as fontes."""
    cnpj: str = ''
    razao_social: str = ''
    nome_fantasia: str = ''
    situacao: str = ''
    data_situacao: str = ''
    motivo_situacao: str = ''
    data_abertura: str = ''
    natureza_juridica: str = ''
    porte: str = ''
    capital_social: str = ''
    endereco: Endereco = field(default_factory=Endereco)
    telefone: str = ''
    email: str = ''
    atividade_principal: str = ''
    atividades_secundarias: List[str] = field(default_factory=list)
    socios: List[Socio] = field(default_factory=list)

    @property
    def situacao_ativa(self) -> bool:
        return 'ativa' in self.situacao.lower()


@dataclass
class ResultadoConsulta:
    sucesso: bool
    dados: Optional[DadosCNPJ] = None
    erro: str = ''
    motivo: str = ''
    fonte: str = ''
    oficial: bool = False
    consultado_em: str = ''

    @classmethod
    def falha(cls, motivo: str, erro: str, **extras):
        return cls(sucesso=False, motivo=motivo, erro=erro, **extras)

    def to_dict(self):
        return asdict(self)

    def __repr__(self):
        if self.sucesso:
            return f'<ResultadoConsulta {self.fonte} - {self.dados.razao_social}>'
        return f'<ResultadoConsulta falha [{self.motivo}] {self.erro}>'
