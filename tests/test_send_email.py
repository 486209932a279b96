import smtplib

from conftest import RespostaFalsa
from app import mail


def test_campos_obrigatorios(client, outbox):
    resposta = client.post('/api/send-email', json={'nome': 'João', 'email': 'joao@empresa.com'})
    assert resposta.status_code == 400
    assert resposta.get_json() == {"success": False, "message": 'Nome, email e telefone são obrigatórios'}
    assert len(outbox) == 0


def test_envio_em_json_com_consulta_de_cnpj(client, outbox, fontes_cnpj):
    fontes_cnpj.respostas['brasilapi'] = RespostaFalsa(200, {
        'razao_social': 'STARTUP INOVADORA LTDA',
        'descricao_situacao_cadastral': 'ATIVA',
    })

    resposta = client.post('/api/send-email', json={
        'nome': 'João Souza',
        'email': 'joao@startup.com',
        'telefone': '92988776655',
        'empresa': 'Startup Inovadora',
        'cnpj': '11.222.333/0001-81',
        'valorAporte': 'R$ 500.000',
        'descricao': 'Expansão da operação',
    })

    assert resposta.status_code == 200
    assert resposta.get_json() == {"success": True, "message": "E-mail enviado com sucesso!"}
    email = outbox[0]
    assert email.subject == '🚀 Nova Solicitação de Aporte - Startup Inovadora'
    assert 'STARTUP INOVADORA LTDA' in email.html
    assert 'R$ 500.000' in email.html


def test_envio_por_formulario_sem_cnpj(client, outbox, fontes_cnpj):
    resposta = client.post('/api/send-email', data={
        'nome': 'Ana',
        'email': 'ana@exemplo.com',
        'telefone': '92911112222',
    })

    assert resposta.status_code == 200
    assert fontes_cnpj.chamadas == []
    assert outbox[0].subject == '🚀 Nova Solicitação de Aporte - Ana'
    assert 'Erro na consulta' not in outbox[0].html


def test_falha_no_smtp(client, monkeypatch):
    def falhar(msg):
        raise smtplib.SMTPAuthenticationError(535, b'credenciais invalidas')

    monkeypatch.setattr(mail, 'send', falhar)

    resposta = client.post('/api/send-email', json={
        'nome': 'Ana',
        'email': 'ana@exemplo.com',
        'telefone': '92911112222',
    })

    assert resposta.status_code == 500
    assert resposta.get_json() == {"success": False, "message": "Erro interno do servidor"}


def test_metodo_nao_permitido(client):
    resposta = client.get('/api/send-email')
    assert resposta.status_code == 405
    assert resposta.get_json()['message'] == 'Método não permitido'
