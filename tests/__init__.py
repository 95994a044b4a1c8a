"""
Shadowpool Verifier Test Suite
==============================

Test organization:
- tests/unit/          - Unit tests for the shared library
- tests/services/      - HTTP route tests against the ASGI app
- tests/zk_circuit.py  - Toy Groth16 circuit used to mint proofs

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
"""
