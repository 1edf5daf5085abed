import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.exceptions import ErrorValidacion
from .serializers import LoginSerializer, LogoutSerializer, PerfilSerializer

logger = logging.getLogger(__name__)


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """Iniciar sesión y obtener tokens JWT"""
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    user = serializer.validated_data['user']
    refresh = RefreshToken.for_user(user)
    access = str(refresh.access_token)
    logger.info("Inicio de sesión del usuario %s", user.pk)

    return Response({
        'token': access,
        'access': access,
        'refresh': str(refresh),
        'user': PerfilSerializer(user).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Cerrar sesión invalidando el refresh token"""
    serializer = LogoutSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        token = RefreshToken(serializer.validated_data['refresh'])
        token.blacklist()
    except TokenError:
        raise ErrorValidacion({'refresh': 'Token inválido'}, detail='Token inválido')

    logger.info("Cierre de sesión del usuario %s", request.user.pk)
    return Response({'message': 'Sesión cerrada exitosamente'}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile_view(request):
    """Obtener perfil del usuario actual"""
    return Response(PerfilSerializer(request.user).data)
