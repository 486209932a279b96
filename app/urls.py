# app/urls.py
from flask import current_app, request


def url_base_publica() -> str:
    """
    URL base anunciada nos links enviados por WhatsApp e e-mail.
    PUBLIC_BASE_URL tem prioridade; em produção usa o domínio da empresa;
    em desenvolvimento, o host que recebeu a requisição.
    """
    config = current_app.config
    if config.get('PUBLIC_BASE_URL'):
        return config['PUBLIC_BASE_URL'].rstrip('/')
    if config.get('APP_ENV') == 'production':
        return config['PUBLIC_BASE_URL_PRODUCAO'].rstrip('/')
    return request.host_url.rstrip('/')


def url_externa(caminho: str) -> str:
    if not caminho.startswith('/'):
        caminho = '/' + caminho
    return url_base_publica() + caminho
