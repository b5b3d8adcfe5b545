"""
Integrations for external collaborators.

This package wraps the external lint tool binary and remote configuration hosting.
"""
