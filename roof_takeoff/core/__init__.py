"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Unit conversions, waste set, material category keys
- exceptions: Custom exception hierarchy
- ingress: HTTP request body normalisation and error mapping
"""
