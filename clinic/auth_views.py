"""
Authentication views.

Sign-up, sign-in, token refresh, sign-out and the caller's own profile.
Kept apart from :mod:`clinic.authentication` so REST framework can load
the authentication class without importing the views.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from clinic.permissions import HasProfile
from clinic.serializers.auth import LoginSerializer, LogoutSerializer, ProfileUpdateSerializer, SignupSerializer
from clinic.services import accounts


# ---------------------------------------------------------------------
# Sign-up / sign-in
# ---------------------------------------------------------------------
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def signup_view(request):
    """Create a psychologist account and sign it in."""
    s = SignupSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = accounts.register_psychologist(
        email=vd['email'],
        password=vd['password'],
        full_name=vd['full_name'],
        ip=request.META.get('REMOTE_ADDR'),
    )
    return Response({
        'ok': True,
        'message': 'Conta criada com sucesso! Bem-vindo(a) ao PsiCare.',
        **accounts.issue_tokens(user),
        'user': accounts.serialize_user(user),
    }, status=status.HTTP_201_CREATED)

signup_view.cls.throttle_scope = 'signup'


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([ScopedRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = accounts.login(request, email=s.validated_data['email'], password=s.validated_data['password'])
    if user is None:
        # answered without raising so the audited failure is committed
        return Response({'ok': False, 'error': {'code': 'invalid_credentials', 'message': accounts.BAD_CREDENTIALS}}, status=400)
    return Response({
        'ok': True,
        **accounts.issue_tokens(user),
        'user': accounts.serialize_user(user),
    })

login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
refresh_view = TokenRefreshView.as_view()


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Blacklist the given refresh token, or every outstanding token of the caller."""
    s = LogoutSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    refresh = s.validated_data.get('refresh')
    count = 0
    if refresh:
        try:
            token = RefreshToken(refresh)
        except TokenError as e:
            raise ValidationError({'refresh': [str(e)]})
        if str(token.get('user_id')) != str(request.user.pk):
            raise ValidationError({'refresh': ['Token pertence a outro usuário.']})
        token.blacklist()
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    return Response({'ok': True, 'blacklisted': count})


# ---------------------------------------------------------------------
# Current user
# ---------------------------------------------------------------------
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response(accounts.serialize_user(request.user))


@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated, HasProfile])
def profile_view(request):
    if request.method == 'PATCH':
        s = ProfileUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        accounts.update_profile(request.user, s.validated_data)
    return Response(accounts.serialize_user(request.user))
