from django.contrib import admin
from .models import Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('user', 'task', 'message', 'read', 'created_at')
    list_filter = ('read',)
    search_fields = ('message',)
    readonly_fields = ('user', 'task', 'message', 'created_at')
