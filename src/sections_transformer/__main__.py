from sections_transformer.cli.app import app

app()
