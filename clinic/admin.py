"""
Django admin registrations for the clinic models.

Superusers can inspect and correct data through ``/admin/``.  Requests
made here are not bound to a psychologist, so the database row-level
policies do not restrict them.
"""
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import AuditEvent, Patient, PatientRecord, Profile, User


class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    inlines = (ProfileInline,)
    list_display = ('email', 'username', 'is_active', 'is_staff', 'date_joined')
    search_fields = ('email', 'username', 'profile__full_name')
    ordering = ('email',)

    def get_inlines(self, request, obj):
        # the profile is created by a signal when the user is added
        return self.inlines if obj else ()


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('full_name', 'psychologist', 'status', 'phone', 'created_at')
    list_filter = ('status',)
    search_fields = ('full_name', 'email', 'phone', 'cpf', 'psychologist__email')
    raw_id_fields = ('psychologist',)


@admin.register(PatientRecord)
class PatientRecordAdmin(admin.ModelAdmin):
    list_display = ('patient', 'psychologist', 'session_date', 'session_type')
    list_filter = ('session_type',)
    search_fields = ('patient__full_name', 'psychologist__email')
    date_hierarchy = 'session_date'
    raw_id_fields = ('patient', 'psychologist')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id', 'user__email')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
