"""
CORS settings for the JSON API
"""

CORS_CONFIG = {
    "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    "allow_headers": [
        "Content-Type",
        "X-Requested-With",
        "Accept",
        "Origin",
    ],
    "expose_headers": [
        "Content-Type",
    ],
    "max_age": 86400,  # 24 hours
}


def init_cors(app):
    """Enable CORS on /api/* and /health/* for the configured origins."""
    from flask_cors import CORS

    origins = app.config.get('CORS_ORIGINS', '*')
    if isinstance(origins, str) and origins != '*':
        origins = [o.strip() for o in origins.split(',') if o.strip()]

    CORS(app,
         resources={r"/api/*": {"origins": origins}, r"/health/*": {"origins": origins}},
         methods=CORS_CONFIG["methods"],
         allow_headers=CORS_CONFIG["allow_headers"],
         expose_headers=CORS_CONFIG["expose_headers"],
         max_age=CORS_CONFIG["max_age"])

    app.logger.info("CORS enabled for origins: %s", origins)
