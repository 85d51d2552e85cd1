"""Infrastructure Layer: database, HTTP clients for remote services, logging setup.

Invariants:
    - Infrastructure implements the Protocols in core/repository_protocols.py
    - Every remote failure is mapped to RemoteRejectedError or RemoteTransportError
    - No retries: a remote call either returns or fails the enclosing operation
"""
