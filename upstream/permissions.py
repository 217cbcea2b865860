"""Custom permissions for the application"""
from rest_framework import permissions


class HasUpstreamCredentials(permissions.BasePermission):
    """
    Permission to only allow callers that present a bearer token we can
    forward to the upstream API.
    """

    message = "Authorization header with a bearer token is required."

    def has_permission(self, request, view):
        header = request.META.get("HTTP_AUTHORIZATION", "")
        scheme, _, token = header.partition(" ")
        return scheme.lower() == "bearer" and bool(token.strip())
