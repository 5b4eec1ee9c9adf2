from app.teachrate import create_app

app = create_app()


if __name__ == "__main__":
    # Development server; production goes through scripts/start.py (gunicorn).
    app.run(host="0.0.0.0", port=app.config["PORT"])
