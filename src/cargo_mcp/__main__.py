from .main import app

app(prog_name="cargo-mcp")
