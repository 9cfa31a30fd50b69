import logging
import os
import sqlite3

from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

from catalog_admin.config import BASE_DIR, Config

db = SQLAlchemy()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite no aplica ON DELETE CASCADE sin este pragma
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_app(config_class=Config, **overrides):
    template_dir = os.path.join(BASE_DIR, "templates")
    static_dir = os.path.join(BASE_DIR, "static")

    app = Flask(__name__,
                template_folder=template_dir,
                static_folder=static_dir)

    # CONFIGURACIÓN
    app.config.from_object(config_class)
    app.config.update(overrides)

    app.logger.setLevel(getattr(logging, str(app.config["LOG_LEVEL"]).upper(), logging.INFO))

    # Crear carpetas si no existen
    for folder in (app.config["UPLOAD_FOLDER"], os.path.join(BASE_DIR, "instance")):
        if not os.path.exists(folder):
            os.makedirs(folder)
            app.logger.info("✅ Carpeta creada: %s", folder)

    # Inicializar extensiones
    db.init_app(app)

    from catalog_admin.utils.uploads import UploadStore
    app.extensions["upload_store"] = UploadStore.from_config(app.config)

    from catalog_admin.errors import register_error_handlers
    register_error_handlers(app)

    # Registrar blueprints
    from catalog_admin.routes.public import public_bp
    from catalog_admin.routes.dashboard import dashboard_bp
    from catalog_admin.routes.categories import categories_bp
    from catalog_admin.routes.books import books_bp

    app.register_blueprint(public_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(books_bp)

    return app
