# config.py
import os
import tempfile
from dotenv import load_dotenv

# Pega o caminho absoluto do diretório do projeto.
basedir = os.path.abspath(os.path.dirname(__file__))

# Carrega as variáveis de ambiente do arquivo .env na raiz do projeto
load_dotenv(os.path.join(basedir, '.env'))

ORIGENS_PADRAO = [
    'http://localhost:3000',
    'http://127.0.0.1:3000',
    'http://localhost:5500',
    'http://127.0.0.1:5500',
    'http://localhost:3001',
]


def _lista_env(nome, padrao):
    valor = os.environ.get(nome)
    if not valor:
        return list(padrao)
    return [item.strip() for item in valor.split(',') if item.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'uma-chave-secreta-muito-dificil-de-adivinhar'

    # 'production' troca a URL pública anunciada nos links de download
    APP_ENV = os.environ.get('APP_ENV') or os.environ.get('NODE_ENV') or 'development'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # --- CONSULTA CNPJ ---
    CNPJ_TIMEOUT = 10
    CNPJ_USER_AGENT = 'AporteCapital/1.0'

    # --- E-MAIL (Flask-Mail) ---
    MAIL_SERVER = os.environ.get('SMTP_HOST') or 'smtp.gmail.com'
    MAIL_PORT = int(os.environ.get('SMTP_PORT') or 587)
    # true para 465 (SSL direto); nas outras portas usa STARTTLS
    MAIL_USE_SSL = os.environ.get('SMTP_SECURE') == 'true'
    MAIL_USE_TLS = not MAIL_USE_SSL
    MAIL_USERNAME = os.environ.get('EMAIL_USER')
    MAIL_PASSWORD = os.environ.get('EMAIL_PASS')
    MAIL_DEFAULT_SENDER = ('Formulário de Consultoria', MAIL_USERNAME)
    RECIPIENT_EMAIL = os.environ.get('RECIPIENT_EMAIL')

    WHATSAPP_NUMBER = os.environ.get('WHATSAPP_NUMBER') or '5592999889392'

    # --- URLS PÚBLICAS ---
    PUBLIC_BASE_URL = os.environ.get('PUBLIC_BASE_URL')
    PUBLIC_BASE_URL_PRODUCAO = 'https://aportecapital.com.br'

    CORS_ORIGINS = _lista_env('CORS_ORIGINS', ORIGENS_PADRAO)

    # --- UPLOADS ---
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(basedir, 'uploads')
    CAMPO_ANEXOS = 'documentos'
    MAX_ARQUIVOS = 5
    MAX_TAMANHO_ARQUIVO = 10 * 1024 * 1024  # 10MB
    # Teto do corpo inteiro da requisição: anexos + campos de texto
    MAX_CONTENT_LENGTH = MAX_ARQUIVOS * MAX_TAMANHO_ARQUIVO + 1024 * 1024

    # --- LINKS TEMPORÁRIOS ---
    LINK_MAX_DOWNLOADS = 5
    LINK_VALIDADE_HORAS = 48
    LIMPEZA_AUTOMATICA = True
    LIMPEZA_INTERVALO_SEGUNDOS = int(os.environ.get('LIMPEZA_INTERVALO_SEGUNDOS') or 3600)


class TestingConfig(Config):
    TESTING = True
    APP_ENV = 'test'
    MAIL_SUPPRESS_SEND = True
    MAIL_USERNAME = 'formulario@example.com'
    MAIL_DEFAULT_SENDER = ('Formulário de Consultoria', MAIL_USERNAME)
    RECIPIENT_EMAIL = 'contato@example.com'
    PUBLIC_BASE_URL = 'http://testserver'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'consultoria-uploads-teste')
    LIMPEZA_AUTOMATICA = False
