# run.py
import json
import os

import click

from app import create_app
from app.services.cnpj_service import consultar_cnpj
from app.services.link_service import obter_registro

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {'registro': obter_registro()}


@app.cli.command("limpar-links")
def limpar_links_command():
    """Remove links temporários expirados ou desativados e seus arquivos."""
    with app.app_context():
        removidos = obter_registro().limpar()
    click.echo(f"{removidos} link(s) removido(s).")


@app.cli.command("consultar-cnpj")
@click.argument("cnpj")
def consultar_cnpj_command(cnpj):
    """Consulta um CNPJ nas fontes configuradas e mostra o registro normalizado."""
    with app.app_context():
        resultado = consultar_cnpj(cnpj)

    click.echo(json.dumps(resultado.to_dict(), ensure_ascii=False, indent=2))
    if not resultado.sucesso:
        raise SystemExit(1)


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 3001)), debug=app.config['APP_ENV'] == 'development')
