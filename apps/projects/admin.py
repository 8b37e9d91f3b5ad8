from django.contrib import admin
from .models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """Admin interface for projects and their member slots."""

    list_display = ['name', 'status', 'state_code', 'owner', 'engineer', 'manager', 'purchase_manager', 'created_at']
    list_filter = ['status', 'state_code']
    search_fields = ['name', 'owner__email', 'engineer__email', 'manager__email', 'purchase_manager__email']
    autocomplete_fields = ['owner', 'engineer', 'manager', 'purchase_manager']
    readonly_fields = ['id', 'created_at', 'updated_at']
    ordering = ['-created_at']

    fieldsets = (
        ('Project', {
            'fields': ('id', 'name', 'status', 'state_code')
        }),
        ('Members', {
            'fields': ('owner', 'engineer', 'manager', 'purchase_manager'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    actions = ['put_on_hold', 'reactivate']

    @admin.action(description='Put selected projects on hold')
    def put_on_hold(self, request, queryset):
        count = queryset.update(status='ON_HOLD')
        self.message_user(request, f'{count} project(s) put on hold.')

    @admin.action(description='Reactivate selected projects')
    def reactivate(self, request, queryset):
        count = queryset.update(status='ACTIVE')
        self.message_user(request, f'{count} project(s) reactivated.')
