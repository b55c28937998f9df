from django.db import migrations

ROLES = ['admin', 'cajero', 'cocinero', 'mesero', 'usuario']


def crear_roles(apps, schema_editor):
    Rol = apps.get_model('restaurante', 'Rol')
    for nombre in ROLES:
        Rol.objects.get_or_create(nombre=nombre)


def eliminar_roles(apps, schema_editor):
    Rol = apps.get_model('restaurante', 'Rol')
    Rol.objects.filter(nombre__in=ROLES).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('restaurante', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(crear_roles, eliminar_roles),
    ]
