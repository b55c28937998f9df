# restaurante/views/auth_views.py
"""
Vistas relacionadas con autenticación, autorización y dashboards por rol.
Maneja login, registro, logout, redirección y renderizado de dashboards específicos.
"""

from django.contrib import messages
from django.contrib.auth.views import LoginView, LogoutView
from django.shortcuts import render, redirect
from django.urls import reverse, reverse_lazy

from ..acceso import ROLES_COCINA, NombreRol, ruta_inicio, sesion_desde_request, EstadoSesion
from ..decorators import rol_requerido, form_debounce
from ..forms import CustomAuthenticationForm, RegistroForm, ConfiguracionFacturaForm, ProductoForm
from ..models import ConfiguracionFactura
from ..services import admin_service, auth_service, cocina_service, pedido_service, usuario_service, catalogo_service


# === VISTAS DE AUTENTICACIÓN ===

class UserLoginView(LoginView):
    """Gestiona el inicio de sesión del usuario."""
    template_name = 'login.html'
    form_class = CustomAuthenticationForm
    redirect_authenticated_user = True

    def get_success_url(self):
        # Tras el login se enruta por rol, nunca por historial
        return reverse('dashboard')


class UserLogoutView(LogoutView):
    """Gestiona el cierre de sesión del usuario."""
    next_page = reverse_lazy('login')

    def post(self, request, *args, **kwargs):
        auth_service.cerrar_sesion(request)
        return redirect(self.get_success_url())


@form_debounce()
def registro_view(request):
    """Registro de cuenta nueva con rol 'usuario'; inicia sesión al terminar."""
    if request.user.is_authenticated:
        return redirect('dashboard')

    form = RegistroForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        resultado = auth_service.registrar(
            form.cleaned_data['email'],
            form.cleaned_data['password'],
            form.cleaned_data['nombre_completo'],
        )
        if resultado['success']:
            auth_service.autenticar(request, form.cleaned_data['email'], form.cleaned_data['password'])
            messages.success(request, 'Cuenta creada correctamente')
            return redirect('dashboard')
        for error in resultado['errores']:
            form.add_error(None, error)
    return render(request, 'registro.html', {'form': form})


# === REDIRECCIÓN PRINCIPAL ===

def dashboard_redirect(request):
    """Redirige al usuario a su panel de control correspondiente según su rol."""
    sesion = sesion_desde_request(request)
    if sesion.estado == EstadoSesion.SIN_AUTENTICAR:
        return redirect('login')
    return redirect(ruta_inicio(sesion.rol))


# === DASHBOARDS PRINCIPALES ===

@rol_requerido([NombreRol.ADMIN])
def dashboard_admin(request):
    """Renderiza el panel de control para Administradores."""
    context = {
        'estadisticas': admin_service.obtener_estadisticas(),
        'pedidos': pedido_service.listar_pedidos(ascendente=False),
        'productos': catalogo_service.listar_productos(solo_activos=False),
        'usuarios': admin_service.listar_usuarios(),
        'roles': NombreRol.choices,
        'producto_form': ProductoForm(),
        'factura_form': ConfiguracionFacturaForm(instance=ConfiguracionFactura.actual()),
    }
    return render(request, 'dashboards/admin_dashboard.html', context)


@rol_requerido(ROLES_COCINA)
def dashboard_cocinero(request):
    """Renderiza el panel de control para Cocineros."""
    context = {
        'activos': cocina_service.obtener_pedidos_activos()['pedidos'],
        'pendientes_entrega': cocina_service.obtener_pendientes_entrega()['pedidos'],
        'resumen': cocina_service.obtener_resumen_cocina(),
    }
    return render(request, 'dashboards/cocinero_dashboard.html', context)


@rol_requerido([NombreRol.CAJERO, NombreRol.ADMIN])
def dashboard_cajero(request):
    """Renderiza el panel de control para Cajeros (tablero de solo lectura)."""
    context = {'pedidos': pedido_service.listar_pedidos(ascendente=False)}
    return render(request, 'dashboards/tablero_pedidos.html', context)


@rol_requerido([NombreRol.MESERO, NombreRol.ADMIN])
def dashboard_mesero(request):
    """Renderiza el panel de control para Meseros (tablero de solo lectura)."""
    context = {'pedidos': pedido_service.listar_pedidos(ascendente=False)}
    return render(request, 'dashboards/tablero_pedidos.html', context)


@rol_requerido([NombreRol.USUARIO])
def dashboard_usuario(request):
    """Renderiza el panel del cliente con su historial y resumen."""
    busqueda = request.GET.get('q', '')
    rango = request.GET.get('fecha', 'all')
    context = {
        'historial': usuario_service.historial(request.user, busqueda, rango)['pedidos'],
        'resumen': usuario_service.resumen(request.user),
        'destacados': catalogo_service.listar_productos(solo_destacados=True),
        'busqueda': busqueda,
        'rango': rango,
    }
    return render(request, 'dashboards/usuario_dashboard.html', context)


@rol_requerido()
def perfil_view(request):
    """Actualiza el nombre completo del principal autenticado."""
    if request.method == 'POST':
        resultado = auth_service.actualizar_perfil(request.user, request.POST.get('nombre_completo'))
        if resultado['success']:
            messages.success(request, resultado['mensaje'])
        else:
            for error in resultado['errores']:
                messages.error(request, error)
    return redirect('dashboard')


@rol_requerido()
def cambiar_password_view(request):
    """Cambia la contraseña del principal autenticado sin cerrar su sesión."""
    if request.method == 'POST':
        resultado = auth_service.cambiar_password(request, request.POST)
        if resultado['success']:
            messages.success(request, resultado['mensaje'])
        else:
            for error in resultado['errores']:
                messages.error(request, error)
    return redirect('dashboard')
