from glide_go.cli import app

app()
