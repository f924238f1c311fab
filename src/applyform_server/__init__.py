"""applyform_server — FastAPI backend for the application form.

Serves the live question schema, ingests submissions (JSON or multipart
with uploads), and exposes the admin review endpoints behind a bearer
token.
"""
