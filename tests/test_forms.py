from conftest import formulario_valido
from app.consultoria.forms import SolicitacaoAporte, SolicitacaoConsultoria


def test_formulario_valido():
    solicitacao, erros = SolicitacaoConsultoria.from_form(formulario_valido(outrosDocumentos='  IR 2023  '))
    assert erros == []
    assert solicitacao.nome_completo == 'Maria da Silva'
    assert solicitacao.outros_documentos == 'IR 2023'


def test_formulario_vazio_reune_todos_os_erros():
    _, erros = SolicitacaoConsultoria.from_form({})
    assert erros == [
        'Nome completo é obrigatório e deve ter pelo menos 2 caracteres',
        'Email válido é obrigatório',
        'Telefone válido é obrigatório',
        'Nome da empresa é obrigatório',
        'CNPJ é obrigatório e deve ser válido',
        'Tempo de existência da empresa é obrigatório',
        'Faturamento anual é obrigatório',
        'Tipo de consultoria é obrigatório',
        'Descrição do projeto é obrigatória e deve ter pelo menos 5 caracteres',
    ]


def test_espacos_nao_contam_como_conteudo():
    _, erros = SolicitacaoConsultoria.from_form(formulario_valido(nomeCompleto='  A  ', mensagem='   oi   '))
    assert 'Nome completo é obrigatório e deve ter pelo menos 2 caracteres' in erros
    assert 'Descrição do projeto é obrigatória e deve ter pelo menos 5 caracteres' in erros


def test_aporte_aceita_valores_nao_textuais():
    solicitacao, erros = SolicitacaoAporte.from_form({
        'nome': 'Ana', 'email': 'ana@exemplo.com', 'telefone': 92911112222, 'valorAporte': 500000,
    })
    assert erros == []
    assert solicitacao.telefone == '92911112222'
    assert solicitacao.valor_aporte == '500000'
    assert solicitacao.cnpj == ''
