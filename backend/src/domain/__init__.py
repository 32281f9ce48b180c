"""
Domain layer: snapshot models and analytics services.
"""
