from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Estudiante',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rut', models.CharField(max_length=12, unique=True)),
                ('nombre', models.CharField(max_length=100)),
                ('apellido', models.CharField(max_length=100)),
                ('email', models.EmailField(blank=True, max_length=100, null=True)),
                ('fecha_nacimiento', models.DateField()),
                ('curso', models.CharField(choices=[('Pre-Kinder', 'Pre-Kinder'), ('Kinder', 'Kinder'), ('1° Básico', '1° Básico'), ('2° Básico', '2° Básico'), ('3° Básico', '3° Básico'), ('4° Básico', '4° Básico'), ('5° Básico', '5° Básico'), ('6° Básico', '6° Básico'), ('7° Básico', '7° Básico'), ('8° Básico', '8° Básico'), ('I Medio', 'I Medio'), ('II Medio', 'II Medio'), ('III Medio', 'III Medio'), ('IV Medio', 'IV Medio')], max_length=20)),
                ('tipo_estudiante', models.CharField(choices=[('Regular', 'Regular'), ('Programa Integración', 'Programa Integración')], default='Regular', max_length=30)),
                ('anio_academico', models.PositiveIntegerField()),
                ('nombre_apoderado1', models.CharField(blank=True, max_length=100, null=True)),
                ('contacto_apoderado1', models.CharField(blank=True, max_length=20, null=True)),
                ('nombre_apoderado2', models.CharField(blank=True, max_length=100, null=True)),
                ('contacto_apoderado2', models.CharField(blank=True, max_length=20, null=True)),
                ('direccion', models.CharField(blank=True, max_length=255, null=True)),
                ('informacion_salud', models.TextField(blank=True, null=True)),
                ('condiciones_medicas', models.TextField(blank=True, null=True)),
                ('alergias', models.TextField(blank=True, null=True)),
                ('fecha_matricula', models.DateField(blank=True, null=True)),
                ('tiene_beca', models.BooleanField(default=False)),
                ('detalles_beca', models.TextField(blank=True, null=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Estudiante',
                'verbose_name_plural': 'Estudiantes',
                'db_table': 'estudiante',
                'ordering': ['apellido', 'nombre'],
            },
        ),
    ]
