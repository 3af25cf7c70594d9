"""Adapter package for external I/O implementations.

Purpose:
    Collect the concrete HTTP engine, response cache, JSON codec, request
    executor and settings persistence behind the domain ports.

Dependencies:
    Individual submodules depend on ``requests``/``urllib3``, ``pydantic``
    and filesystem APIs.

Call context:
    Imported by application wiring (``jsonclient.app``) and by tests (for
    stub sessions and transport-level behavior verification).
"""
