"""HTTP surface: Flask app factory, blueprints and error handling."""
