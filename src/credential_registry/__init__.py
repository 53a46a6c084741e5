"""Credential registry - issuer authorization, credential issuance and verification."""
