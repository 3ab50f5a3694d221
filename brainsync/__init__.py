# brainsync/__init__.py
"""
Backend Package for the BrainSync video course platform

Modules:
- app: Flask application factory and entry point
- config: settings management
- errors: error taxonomy shared with the client package
- models: VideoRecord fields and create-path validation
- auth: identity token verification and role claims
- database: Firestore-backed catalog store
- storage: S3 object storage for uploaded video files
- api_routes: REST API endpoints
"""

__version__ = "1.0.0"
__description__ = "BrainSync Video Course Platform Backend"
