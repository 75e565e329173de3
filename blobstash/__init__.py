"""
blobstash: an anonymous, write-once blob store served over HTTP.

Clients upload opaque bytes with `POST /` and get back a time-ordered
identifier; anyone can fetch the exact bytes again with `GET /{id}`.
"""

__version__ = "0.1.0"
