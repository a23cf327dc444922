"""Flask application factory."""
from flask import Flask, request, jsonify
from flask_wtf.csrf import CSRFProtect
import os


def create_app(config_object='config.Config', archive=None):
    """
    Create and configure the Flask application.

    Args:
        config_object: Import path or object passed to app.config.from_object
        archive: Pre-built ProposalArchive (tests); loaded from
            ARCHIVE_DATA_PATH when omitted
    """
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Initialize CSRF protection
    csrf = CSRFProtect(app)

    from flask_wtf.csrf import CSRFError

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e):
        app.logger.warning(f"CSRF Error: {e.description}")
        return jsonify({'status': 'error', 'message': 'Oturum süresi doldu. Sayfayı yenileyin.'}), 400

    # Initialize Sentry for error tracking in production
    if app.config.get('SENTRY_DSN') and (app.config.get('ENV') == 'production' or os.getenv('FLASK_ENV') == 'production'):
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            environment=os.getenv('FLASK_ENV', 'production'),
            release=os.getenv('GIT_COMMIT', 'unknown')
        )

    # Production: Enable ProxyFix for HTTPS behind Nginx reverse proxy
    if app.config.get('ENV') == 'production':
        from werkzeug.middleware.proxy_fix import ProxyFix
        app.wsgi_app = ProxyFix(
            app.wsgi_app,
            x_for=1,      # Trust X-Forwarded-For with 1 proxy
            x_proto=1,    # Trust X-Forwarded-Proto
            x_host=1,     # Trust X-Forwarded-Host
            x_port=1,     # Trust X-Forwarded-Port
            x_prefix=0    # No prefix (not behind a URL prefix)
        )

    # Proposal archive
    from teklif.services.archive_service import ProposalArchive
    if archive is None:
        archive = ProposalArchive.from_file(app.config['ARCHIVE_DATA_PATH'])
    app.extensions['proposal_archive'] = archive

    # Error Handlers
    from teklif.exceptions import ArchiveError

    @app.errorhandler(ArchiveError)
    def handle_archive_error(error):
        """Handle custom application exceptions."""
        app.logger.error(f"ArchiveError [{error.status_code}]: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found_error(error):
        return jsonify({'status': 'error', 'message': 'Not Found'}), 404

    @app.errorhandler(500)
    @app.errorhandler(Exception)
    def internal_error(error):
        import traceback
        from werkzeug.exceptions import HTTPException
        if isinstance(error, HTTPException):
            return jsonify({'status': 'error', 'message': error.description}), error.code

        app.logger.error(f"Unhandled Exception: {error}")
        app.logger.error(f"Traceback: {traceback.format_exc()}")
        return jsonify({'status': 'error', 'message': 'Internal Server Error'}), 500

    # Register blueprints
    from teklif.blueprints.proposals import proposals_bp

    app.register_blueprint(proposals_bp)

    # Register CLI commands
    from teklif.cli_commands import init_cli_commands
    init_cli_commands(app)

    app.logger.info(f"ARCHIVE_DATA_PATH={app.config.get('ARCHIVE_DATA_PATH')}")

    return app
