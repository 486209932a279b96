# app/services/whatsapp_service.py
import re
from datetime import datetime
from urllib.parse import quote

CODIGO_PAIS = '55'
# Mesmos caracteres que o encodeURIComponent do frontend deixa sem escape
CARACTERES_SEGUROS = "-_.!~*'()"


def gerar_url_whatsapp(numero: str, mensagem: str) -> str:
    """Gera URL do WhatsApp com mensagem pré-preenchida."""
    numero_limpo = re.sub(r'\D', '', numero or '')
    # Adiciona código do país se não tiver (assume Brasil +55)
    if not numero_limpo.startswith(CODIGO_PAIS):
        numero_limpo = f"{CODIGO_PAIS}{numero_limpo}"
    return f"https://wa.me/{numero_limpo}?text={quote(mensagem, safe=CARACTERES_SEGUROS)}"


def _bloco_solicitacao(solicitacao, titulo_empresa='EMPRESA'):
    return f"""👤 *DADOS DO SOLICITANTE:*
• Nome: {solicitacao.nome_completo}
• Email: {solicitacao.email}
• Telefone: {solicitacao.telefone}

🏭 *{titulo_empresa}:*
• Razão Social: {solicitacao.empresa}
• CNPJ: {solicitacao.cnpj}
• Faturamento Anual: {solicitacao.faturamento_anual}
• Tempo de Existência: {solicitacao.tempo_existencia}

💼 *CONSULTORIA SOLICITADA:*
• Tipo: {solicitacao.tipo_consultoria}
• Descrição: {solicitacao.mensagem}"""


def mensagem_para_cliente(solicitacao, anexos=None) -> str:
    """Mensagem que o cliente envia pelo WhatsApp; não contém o link de download."""
    if anexos:
        documentos = f"""📋 *DOCUMENTOS ENVIADOS:*
✅ {len(anexos)} arquivo(s) enviado(s) por EMAIL
✅ Solicitação enviada com sucesso!

📧 Aguarde retorno da Aporte Capital
🕐 Resposta em até 24 horas úteis"""
    else:
        documentos = '📄 *DOCUMENTOS:* Nenhum documento anexado'

    return f"""🏢 *APORTE CAPITAL - Solicitação Enviada*

✅ *SUA SOLICITAÇÃO FOI ENVIADA COM SUCESSO!*

{_bloco_solicitacao(solicitacao)}

{documentos}

🎯 *PRÓXIMOS PASSOS:*
• Nossa equipe analisará sua solicitação
• Entraremos em contato em breve
• Mantenha seu WhatsApp ativo

Obrigado por escolher a Aporte Capital! 🚀"""


def mensagem_para_empresa(solicitacao, url_download=None, anexos=None,
                          validade_horas=48, max_downloads=5) -> str:
    """Mensagem interna da equipe, com o link de download quando houver anexos."""
    if anexos and url_download:
        documentos = f"""📋 *DOCUMENTOS ENVIADOS:*
✅ {len(anexos)} arquivo(s) enviado(s) por EMAIL
✅ Disponíveis para download em:
🔗 {url_download}

⏰ Link válido por {validade_horas} horas
🔒 Acesso seguro e temporário
🔢 Máximo {max_downloads} downloads

📧 Verifique também seu email para detalhes completos!"""
    else:
        documentos = '📄 *DOCUMENTOS:* Nenhum documento anexado'

    return f"""🏢 *APORTE CAPITAL - NOVA SOLICITAÇÃO*

🚨 *ATENÇÃO EQUIPE:* Nova solicitação recebida!

{_bloco_solicitacao(solicitacao, 'INFORMAÇÕES DA EMPRESA')}

{documentos}

⚡ *AÇÃO NECESSÁRIA:*
• Analisar solicitação
• Baixar documentos (se houver)
• Entrar em contato em até 24h

⏰ *Enviado em:* {datetime.now():%d/%m/%Y %H:%M:%S}

---
*Mensagem automática - Aporte Capital*"""
