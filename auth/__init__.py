"""auth/ -- Session login and request signing for the Synapse client.

Layer rule: auth/ imports only stdlib, third-party libraries and core.errors.
core/transport.py imports from auth/, not the other way around.
"""
