"""
Django Admin Configuration for User Management
"""

from django.contrib import admin
from .models import xx_User


@admin.register(xx_User)
class UserAdmin(admin.ModelAdmin):
    """Admin interface for users."""
    list_display = ('username', 'name', 'email', 'role', 'is_active')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'name', 'email')
    readonly_fields = ('last_login', 'date_joined')
    ordering = ('username',)

    fieldsets = (
        ('User Information', {
            'fields': ('username', 'name', 'email', 'password', 'role')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser')
        }),
        ('Metadata', {
            'fields': ('last_login', 'date_joined'),
            'classes': ('collapse',)
        })
    )
