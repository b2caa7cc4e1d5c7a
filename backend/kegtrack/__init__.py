# backend/kegtrack/__init__.py
from __future__ import annotations

from flask import Flask, request

from .config import Config
from .extensions import init_store
from .services.store import DomainStore


def create_app(config_overrides: dict | None = None, store: DomainStore | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(app.config["LOG_LEVEL"])

    store = init_store(app, store)
    if app.config["SEED_DEMO_DATA"]:
        from .services.seed_service import seed_demo_data
        seed_demo_data(store)

    # Register blueprints
    from .routes.system import system_bp
    from .routes.kegs import kegs_bp
    from .routes.activities import activities_bp
    from .routes.customers import customers_bp
    from .routes.orders import orders_bp
    from .routes.customer_notes import customer_notes_bp
    from .routes.cider import cider_types_bp, cider_batches_bp, cider_ingredients_bp
    from .routes.fermentation import fermentation_bp
    from .routes.analytics import analytics_bp
    from .routes.reports import reports_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(kegs_bp)
    app.register_blueprint(activities_bp)
    app.register_blueprint(customers_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(customer_notes_bp)
    app.register_blueprint(cider_types_bp)
    app.register_blueprint(cider_batches_bp)
    app.register_blueprint(cider_ingredients_bp)
    app.register_blueprint(fermentation_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(reports_bp)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PATCH,DELETE,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
