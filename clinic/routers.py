"""
URL mappings for the PsiCare API.

Trailing slashes are deliberately omitted; the front-end calls the paths
exactly as listed here.
"""
from django.urls import path, include

from .auth_views import login_view, logout_view, me_view, profile_view, refresh_view, signup_view
from .views import health
from .views.dashboard import dashboard
from .views.patients import patient_detail, patients_list
from .views.records import patient_records, record_detail


urlpatterns = [
    # exposes /metrics
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/signup', signup_view, name='signup_view'),
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', refresh_view, name='refresh_view'),
    path('api/auth/logout', logout_view, name='logout_view'),
    path('api/auth/me', me_view, name='me_view'),
    path('api/profile', profile_view, name='profile_view'),
    # Dashboard
    path('api/dashboard', dashboard, name='dashboard'),
    # Patients
    path('api/patients', patients_list, name='patients_list'),
    path('api/patients/<uuid:pk>', patient_detail, name='patient_detail'),
    # Session records (prontuários)
    path('api/patients/<uuid:pk>/records', patient_records, name='patient_records'),
    path('api/records/<uuid:pk>', record_detail, name='record_detail'),
]
