# app/consultoria/__init__.py

from flask import Blueprint

bp = Blueprint('consultoria', __name__)

# Importa as rotas no final para evitar dependências circulares
from app.consultoria import routes
