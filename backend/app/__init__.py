from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from app.config import Config
from app.extensions import init_mongo
from app.utils.errors import ValidationError

jwt = JWTManager()


def create_app(config_class=Config, mongo_client=None):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config["LOG_LEVEL"])

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    CORS(
        app,
        supports_credentials=True,
        resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}}
    )
    # Init extensions
    init_mongo(app, client=mongo_client)
    jwt.init_app(app)

    # Register blueprints
    from app.users.routes import users_bp
    from app.groups.routes import groups_bp
    from app.expenses.routes import expenses_bp
    from app.balances.routes import balances_bp
    from app.activities.routes import activities_bp
    from app.invitations.routes import invitations_bp
    from app.personal_expenses.routes import personal_expenses_bp

    app.register_blueprint(users_bp, url_prefix='/api/v1/users')
    app.register_blueprint(groups_bp, url_prefix='/api/v1/groups')
    app.register_blueprint(expenses_bp, url_prefix='/api/v1/expenses')
    app.register_blueprint(balances_bp, url_prefix='/api/v1/balances')
    app.register_blueprint(activities_bp, url_prefix='/api/v1/activities')
    app.register_blueprint(invitations_bp, url_prefix='/api/v1/invitations')
    app.register_blueprint(personal_expenses_bp, url_prefix='/api/v1/personal-expenses')

    @app.errorhandler(ValidationError)
    def handle_validation_error(err):
        app.logger.info("[Validation] %s", err.message)
        return jsonify(err.to_dict()), 400

    return app
