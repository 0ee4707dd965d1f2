import atexit
import logging
from flask import Flask
from config import Config
from db import make_client
from commands import init_db_command, schema_status_command
from initializer import initialize
from manifest import BUDGET_TRACKER_MANIFEST
from routes.health import bp as health_bp
from store import MongoSchemaStore


def create_app(database=None, config=Config):
    """
    App factory.
    - database: an explicit pymongo Database handle; built from config when omitted
    - with INIT_SCHEMA_ON_STARTUP the schema is reconciled before the app is returned
    """
    app = Flask(__name__)
    app.config.from_object(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if database is None:
        # the app owns a client it built itself; callers close the ones they pass in
        client = make_client(config)
        app.extensions["budget_client"] = client
        atexit.register(client.close)
        database = client[app.config["MONGODB_DB"]]
    app.extensions["budget_db"] = database

    app.register_blueprint(health_bp)
    app.cli.add_command(init_db_command)
    app.cli.add_command(schema_status_command)

    if app.config["INIT_SCHEMA_ON_STARTUP"]:
        # InitError propagates: a half-initialized schema should stop the deploy
        initialize(
            MongoSchemaStore(database),
            BUDGET_TRACKER_MANIFEST,
            deadline=app.config["INIT_TIMEOUT_SECONDS"],
        )

    return app


if __name__ == "__main__":
    create_app().run(debug=True, port=5001)
