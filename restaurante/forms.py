# restaurante/forms.py

from decimal import Decimal

from django import forms
from django.contrib.auth.forms import AuthenticationForm

from .models import ConfiguracionFactura, Producto


class CustomAuthenticationForm(AuthenticationForm):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # Aquí personalizamos los campos del formulario
        self.fields['username'].widget.attrs.update({
            'class': 'form-control',
            'placeholder': 'Correo Electrónico'
        })
        self.fields['password'].widget.attrs.update({
            'class': 'form-control',
            'placeholder': 'Contraseña'
        })


class RegistroForm(forms.Form):
    nombre_completo = forms.CharField(max_length=150)
    email = forms.EmailField(max_length=100)
    password = forms.CharField(widget=forms.PasswordInput, min_length=6)
    confirmar_password = forms.CharField(widget=forms.PasswordInput)
    acepta_terminos = forms.BooleanField(required=True)

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('password') != cleaned_data.get('confirmar_password'):
            self.add_error('confirmar_password', 'Las contraseñas no coinciden')
        return cleaned_data


class ProductoForm(forms.ModelForm):
    # Ingredientes como texto, uno por línea o separados por coma
    ingredientes = forms.CharField(required=False, widget=forms.Textarea)

    class Meta:
        model = Producto
        fields = ('nombre', 'descripcion', 'ingredientes', 'categoria', 'precio', 'imagen_url', 'is_featured')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk and not self.is_bound:
            self.initial['ingredientes'] = '\n'.join(self.instance.ingredientes or [])

    def clean_ingredientes(self):
        texto = self.cleaned_data.get('ingredientes') or ''
        partes = texto.replace(',', '\n').splitlines()
        return [parte.strip() for parte in partes if parte.strip()]

    def clean_precio(self):
        precio = self.cleaned_data['precio']
        if precio < Decimal('0'):
            raise forms.ValidationError('El precio no puede ser negativo')
        return precio


class CarritoCheckoutForm(forms.Form):
    nombre_cliente = forms.CharField(max_length=100)
    notas = forms.CharField(required=False, widget=forms.Textarea)

    def clean_nombre_cliente(self):
        nombre = self.cleaned_data['nombre_cliente'].strip()
        if not nombre:
            raise forms.ValidationError('Por favor ingresa tu nombre para completar el pedido.')
        return nombre


class ConfiguracionFacturaForm(forms.ModelForm):
    class Meta:
        model = ConfiguracionFactura
        exclude = ('actualizado_en',)
