"""
Serving: FastAPI application for uploading documents and asking questions.

The HTTP routes stand in for the upload and ask buttons of a browser
front end; rendering is left to whatever client calls them.
"""
