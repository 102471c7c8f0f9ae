from docpublish.cli import app

app()
