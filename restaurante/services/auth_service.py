# restaurante/services/auth_service.py
"""
Servicio de identidad: autenticación, registro, perfil y auditoría de seguridad.
"""

import logging

from django.contrib.auth import authenticate, login, logout, update_session_auth_hash
from django.contrib.auth.forms import PasswordChangeForm
from django.db import DatabaseError, IntegrityError, transaction

from ..models import NombreRol, RegistroSeguridad, Rol, Usuario

logger = logging.getLogger(__name__)


def _escribir_evento(usuario_id, accion, descripcion, direccion_ip, metadata):
    try:
        RegistroSeguridad.objects.create(
            usuario_id=usuario_id,
            accion=accion,
            descripcion=descripcion,
            direccion_ip=direccion_ip,
            metadata=metadata or {},
        )
    except DatabaseError:
        # La auditoría nunca bloquea la acción que describe
        logger.exception('No se pudo registrar el evento de seguridad %s (usuario %s)', accion, usuario_id)


def registrar_evento_seguridad(usuario_id, accion, descripcion='', direccion_ip=None, metadata=None):
    """
    Registra un evento de auditoría en segundo plano: se escribe cuando la transacción
    actual confirma (o de inmediato si no hay transacción). Los fallos solo se loguean.
    """
    transaction.on_commit(
        lambda: _escribir_evento(usuario_id, accion, descripcion, direccion_ip, metadata)
    )


class AuthService:
    """Servicio que maneja la identidad del principal y su perfil."""

    def autenticar(self, request, email, password):
        """
        Inicia sesión con email y contraseña.

        Returns:
            dict: {'success': bool, 'usuario': Usuario, 'errores': list}
        """
        if not email or not password:
            return {'success': False, 'errores': ['Email y contraseña son obligatorios'], 'usuario': None}

        usuario = authenticate(request, email=email.strip().lower(), password=password)
        if usuario is None:
            return {'success': False, 'errores': ['Credenciales inválidas'], 'usuario': None}

        login(request, usuario)
        return {'success': True, 'usuario': usuario}

    def registrar(self, email, password, nombre_completo):
        """Crea la cuenta y su perfil con el rol 'usuario' por defecto."""
        errores = []
        if not (email or '').strip():
            errores.append('El email es obligatorio')
        if not (nombre_completo or '').strip():
            errores.append('El nombre completo es obligatorio')
        if not password or len(password) < 6:
            errores.append('La contraseña debe tener al menos 6 caracteres')
        if errores:
            return {'success': False, 'errores': errores, 'usuario': None}

        try:
            with transaction.atomic():
                rol = Rol.objects.get(nombre=NombreRol.USUARIO)
                usuario = Usuario.objects.create_user(
                    email=email.strip().lower(),
                    nombre_completo=nombre_completo.strip(),
                    password=password,
                    rol=rol,
                )
        except IntegrityError:
            return {'success': False, 'errores': ['Ya existe una cuenta con ese email'], 'usuario': None}
        except (Rol.DoesNotExist, DatabaseError):
            logger.exception('Error registrando la cuenta %s', email)
            return {'success': False, 'errores': ['No se pudo crear la cuenta. Intenta de nuevo.'], 'usuario': None}

        registrar_evento_seguridad(usuario.pk, 'registro', f'Cuenta creada: {usuario.email}')
        return {'success': True, 'usuario': usuario}

    def cerrar_sesion(self, request):
        # logout() vacía la sesión completa, carrito incluido
        logout(request)

    def obtener_perfil(self, usuario_id):
        """Devuelve {'nombre_completo', 'rol'} o None si no existe o no se pudo leer."""
        try:
            datos = (
                Usuario.objects.filter(pk=usuario_id)
                .values('nombre_completo', 'rol__nombre').first()
            )
        except DatabaseError:
            logger.exception('Error leyendo el perfil %s', usuario_id)
            return None
        if datos is None:
            return None
        return {'nombre_completo': datos['nombre_completo'], 'rol': datos['rol__nombre']}

    def actualizar_perfil(self, usuario, nombre_completo):
        if not (nombre_completo or '').strip():
            return {'success': False, 'errores': ['El nombre completo es obligatorio']}
        try:
            Usuario.objects.filter(pk=usuario.pk).update(nombre_completo=nombre_completo.strip())
        except DatabaseError:
            logger.exception('Error actualizando el perfil %s', usuario.pk)
            return {'success': False, 'error_datos': True, 'errores': ['No se pudo actualizar el perfil']}
        return {'success': True, 'mensaje': 'Perfil actualizado'}

    def cambiar_password(self, request, datos):
        """
        Cambia la contraseña del principal autenticado tras verificar la actual.
        La sesión en curso sigue válida; las demás sesiones del usuario se invalidan.
        """
        form = PasswordChangeForm(request.user, datos)
        if not form.is_valid():
            return {'success': False, 'errores': [e for lista in form.errors.values() for e in lista]}
        try:
            usuario = form.save()
        except DatabaseError:
            logger.exception('Error cambiando la contraseña de %s', request.user.pk)
            return {'success': False, 'error_datos': True, 'errores': ['No se pudo cambiar la contraseña']}

        update_session_auth_hash(request, usuario)
        registrar_evento_seguridad(usuario.pk, 'cambio_password', 'Contraseña actualizada')
        return {'success': True, 'mensaje': 'Contraseña actualizada'}
