"""
Licenses module - license issuance and activation.

This module handles:
- LicenseRecord entity and its lifecycle (create, patch, activate)
- System ID formatting and activation password generation
- Sealed license payloads
- Credential notifications and their dead letters
"""
