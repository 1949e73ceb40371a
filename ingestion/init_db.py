from . import create_app
from .routes import get_database


def main():
    app = create_app({"DB_CREATE_SCHEMA": "false"})
    print("Creating database tables...")
    with app.app_context():
        get_database().create_schema()
    print("Database tables created successfully!")


if __name__ == "__main__":
    main()
