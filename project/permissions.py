"""
Centralized permission classes for the parts marketplace.
Use these instead of creating duplicate permission classes in individual apps.
"""
from rest_framework import permissions

from authentication.models import UserRole


class IsWorkshop(permissions.BasePermission):
    """Permission for workshop-only (requester) endpoints"""
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == UserRole.WORKSHOP


class IsStore(permissions.BasePermission):
    """Permission for store-only (supplier) endpoints"""
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == UserRole.STORE


class IsAdmin(permissions.BasePermission):
    """Permission for admin-only endpoints"""
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role == UserRole.ADMIN


class IsWorkshopOrStore(permissions.BasePermission):
    """Permission for workshop or store endpoints"""
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role in [UserRole.WORKSHOP, UserRole.STORE]


class IsWorkshopOrAdmin(permissions.BasePermission):
    """Permission for workshop or admin endpoints"""
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role in [UserRole.WORKSHOP, UserRole.ADMIN]


class IsMarketplaceUser(permissions.BasePermission):
    """Permission for any workshop, store or admin user"""
    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.role in UserRole.values
