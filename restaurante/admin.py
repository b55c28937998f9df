# restaurante/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import UserCreationForm, UserChangeForm

from .models import (
    Rol, Usuario, Producto, Pedido, PedidoItem,
    RegistroSeguridad, ConfiguracionFactura
)


# --- Formularios Personalizados para el Modelo Usuario ---
# Estos formularios le dicen al admin cómo crear y editar usuarios sin el campo 'username'

class CustomUserCreationForm(UserCreationForm):
    class Meta:
        model = Usuario
        fields = ('email', 'nombre_completo', 'rol')

class CustomUserChangeForm(UserChangeForm):
    class Meta:
        model = Usuario
        fields = ('email', 'nombre_completo', 'rol', 'is_active', 'is_staff', 'is_superuser')


# --- Configuraciones Avanzadas del Admin ---

@admin.register(Usuario)
class CustomUserAdmin(UserAdmin):
    """
    Configuración completa para el modelo Usuario en el admin.
    """
    form = CustomUserChangeForm
    add_form = CustomUserCreationForm

    model = Usuario
    list_display = ('email', 'nombre_completo', 'rol', 'is_staff', 'is_active')
    list_filter = ('rol', 'is_staff', 'is_superuser', 'is_active')
    search_fields = ('email', 'nombre_completo')
    ordering = ('email',)

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Información Personal', {'fields': ('nombre_completo', 'rol')}),
        ('Permisos', {'fields': ('is_active', 'is_staff', 'is_superuser')}),
        ('Fechas Importantes', {'fields': ('last_login', 'creado_en')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'nombre_completo', 'rol', 'password1', 'password2'),
        }),
    )
    readonly_fields = ('last_login', 'creado_en')
    filter_horizontal = ()

@admin.register(Rol)
class RolAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'creado_en')

@admin.register(Producto)
class ProductoAdmin(admin.ModelAdmin):
    list_display = ('nombre', 'categoria', 'precio', 'calificacion', 'is_featured', 'is_active')
    list_filter = ('categoria', 'is_featured', 'is_active')
    search_fields = ('nombre', 'descripcion')
    list_editable = ('precio', 'is_featured', 'is_active')

class PedidoItemInline(admin.TabularInline):
    """
    Muestra las líneas del pedido. Son de solo lectura: se escriben una única vez al crear el pedido.
    """
    model = PedidoItem
    extra = 0
    can_delete = False
    readonly_fields = ('producto', 'cantidad', 'precio_unitario', 'total_linea', 'creado_en')

    def has_add_permission(self, request, obj=None):
        return False

@admin.register(Pedido)
class PedidoAdmin(admin.ModelAdmin):
    list_display = ('id', 'nombre_cliente', 'usuario', 'total', 'estado', 'creado_en')
    list_filter = ('estado',)
    search_fields = ('id', 'nombre_cliente', 'usuario__email')
    # El estado solo avanza desde el tablero de cocina
    readonly_fields = ('total', 'estado', 'creado_en', 'actualizado_en')
    inlines = [PedidoItemInline]

@admin.register(RegistroSeguridad)
class RegistroSeguridadAdmin(admin.ModelAdmin):
    list_display = ('accion', 'usuario', 'direccion_ip', 'creado_en')
    list_filter = ('accion',)
    search_fields = ('accion', 'descripcion', 'usuario__email')
    readonly_fields = ('usuario', 'accion', 'descripcion', 'direccion_ip', 'metadata', 'creado_en')

@admin.register(ConfiguracionFactura)
class ConfiguracionFacturaAdmin(admin.ModelAdmin):
    list_display = ('nombre_restaurante', 'nit', 'telefono', 'actualizado_en')
