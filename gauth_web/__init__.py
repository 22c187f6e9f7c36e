"""
gauth_web — Flask JSON API over the gauth library.

Stateless: the caller sends the secret on each request, nothing is stored.
"""

from gauth_web.app import create_app

__all__ = ['create_app']
