# restaurante/models.py

from decimal import Decimal

from django.db import models
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import MinValueValidator, MaxValueValidator

from .estados import EstadoPedido, ESTADO_INICIAL


class NombreRol(models.TextChoices):
    ADMIN = 'admin', 'Administrador'
    CAJERO = 'cajero', 'Cajero'
    COCINERO = 'cocinero', 'Cocinero'
    MESERO = 'mesero', 'Mesero'
    USUARIO = 'usuario', 'Usuario'


class CategoriaProducto(models.TextChoices):
    COMIDA_RAPIDA = 'comida_rapida', 'Comida rápida'
    ESPECIAL = 'especial', 'Especial'
    EXTRA = 'extra', 'Extra'
    BEBIDA = 'bebida', 'Bebida'


# --- Manejador de Usuarios ---
class UsuarioManager(BaseUserManager):
    def create_user(self, email, nombre_completo, password=None, **extra_fields):
        if not email: raise ValueError('El campo Email es obligatorio')
        email = self.normalize_email(email)
        user = self.model(email=email, nombre_completo=nombre_completo, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user
    def create_superuser(self, email, nombre_completo, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('rol', Rol.objects.get(nombre=NombreRol.ADMIN))
        return self.create_user(email, nombre_completo, password, **extra_fields)

# --- Modelos del Sistema ---

class Rol(models.Model):
    nombre = models.CharField(max_length=20, unique=True, choices=NombreRol.choices)
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)
    class Meta:
        verbose_name_plural = "Roles"
    def __str__(self): return self.nombre

class Usuario(AbstractBaseUser, PermissionsMixin):
    """Identidad durable del principal: nombre completo y un único rol."""
    nombre_completo = models.CharField(max_length=150)
    email = models.EmailField(max_length=100, unique=True)
    # null = rol desconocido; no concede acceso a ninguna superficie con rol
    rol = models.ForeignKey(Rol, on_delete=models.PROTECT, null=True, blank=True, related_name='usuarios')
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)
    objects = UsuarioManager()
    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['nombre_completo']
    def __str__(self): return self.email

class Producto(models.Model):
    nombre = models.CharField(max_length=100)
    descripcion = models.TextField(max_length=500, blank=True, null=True)
    ingredientes = models.JSONField(default=list, blank=True)
    categoria = models.CharField(max_length=20, choices=CategoriaProducto.choices)
    precio = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    imagen_url = models.URLField(max_length=255, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)
    calificacion = models.DecimalField(
        max_digits=2, decimal_places=1, default=Decimal('0.0'),
        validators=[MinValueValidator(Decimal('0.0')), MaxValueValidator(Decimal('5.0'))]
    )
    creado_por = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True, related_name='productos_creados')
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)
    def __str__(self): return self.nombre

class Pedido(models.Model):
    # Nombre libre, independiente de la cuenta; usuario null = pedido anónimo
    nombre_cliente = models.CharField(max_length=100)
    usuario = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True, related_name='pedidos')
    total = models.DecimalField(max_digits=12, decimal_places=2)
    estado = models.CharField(max_length=20, choices=EstadoPedido.choices, default=ESTADO_INICIAL)
    notas = models.TextField(blank=True, null=True)
    creado_en = models.DateTimeField(auto_now_add=True)
    actualizado_en = models.DateTimeField(auto_now=True)
    class Meta:
        ordering = ['creado_en']
    def __str__(self): return f"Pedido #{self.id} - {self.nombre_cliente}"

class PedidoItem(models.Model):
    pedido = models.ForeignKey(Pedido, on_delete=models.CASCADE, related_name='items')
    producto = models.ForeignKey(Producto, on_delete=models.PROTECT, related_name='pedido_items')
    cantidad = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    precio_unitario = models.DecimalField(max_digits=10, decimal_places=2)
    total_linea = models.DecimalField(max_digits=12, decimal_places=2)
    creado_en = models.DateTimeField(auto_now_add=True)

    def save(self, *args, **kwargs):
        # Las líneas de un pedido se escriben una sola vez
        if not self._state.adding:
            raise ValueError('Los items de un pedido no se pueden modificar')
        super().save(*args, **kwargs)

class RegistroSeguridad(models.Model):
    usuario = models.ForeignKey(Usuario, on_delete=models.SET_NULL, null=True, blank=True, related_name='eventos_seguridad')
    accion = models.CharField(max_length=50)
    descripcion = models.TextField(blank=True, null=True)
    direccion_ip = models.GenericIPAddressField(blank=True, null=True)
    metadata = models.JSONField(default=dict, blank=True)
    creado_en = models.DateTimeField(auto_now_add=True)
    class Meta:
        verbose_name_plural = "Registros de Seguridad"
        ordering = ['-creado_en']

class ConfiguracionFactura(models.Model):
    nombre_restaurante = models.CharField(max_length=100, default='Casa Pasapalos')
    nit = models.CharField(max_length=30, blank=True)
    direccion = models.CharField(max_length=200, blank=True)
    ciudad_pais = models.CharField(max_length=100, blank=True)
    telefono = models.CharField(max_length=20, blank=True)
    email = models.EmailField(max_length=100, blank=True)
    mensaje_personalizado = models.CharField(max_length=300, blank=True, null=True)
    mostrar_direccion = models.BooleanField(default=True)
    mostrar_estado_pedido = models.BooleanField(default=True)
    mostrar_fecha_hora = models.BooleanField(default=True)
    mostrar_id_pedido = models.BooleanField(default=True)
    mostrar_nombre_cliente = models.BooleanField(default=True)
    actualizado_en = models.DateTimeField(auto_now=True)
    class Meta:
        verbose_name_plural = "Configuración de Factura"
    def __str__(self): return self.nombre_restaurante

    @classmethod
    def actual(cls):
        """Devuelve la configuración vigente, creándola con valores por defecto si no existe."""
        configuracion = cls.objects.order_by('-actualizado_en').first()
        return configuracion or cls.objects.create()
