from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('students', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Intervencion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('titulo', models.CharField(max_length=100)),
                ('descripcion', models.TextField(max_length=2000)),
                ('tipo', models.CharField(choices=[('Comportamiento', 'Comportamiento'), ('Académico', 'Académico'), ('Asistencia', 'Asistencia'), ('Salud', 'Salud'), ('Familiar', 'Familiar'), ('Social', 'Social'), ('Emocional', 'Emocional'), ('Otro', 'Otro')], default='Otro', max_length=30)),
                ('prioridad', models.PositiveSmallIntegerField(choices=[(1, 'Alta'), (2, 'Media'), (3, 'Baja')], default=2)),
                ('estado', models.CharField(choices=[('Pendiente', 'Pendiente'), ('En Proceso', 'En Proceso'), ('Resuelto', 'Resuelto'), ('Cerrado', 'Cerrado')], default='Pendiente', max_length=20)),
                ('ambito', models.CharField(choices=[('Individual', 'Individual'), ('Grupal', 'Grupal'), ('Familiar', 'Familiar')], default='Individual', max_length=20)),
                ('fecha_reporte', models.DateTimeField(default=django.utils.timezone.now)),
                ('fecha_resolucion', models.DateTimeField(blank=True, null=True)),
                ('fecha_seguimiento', models.DateTimeField(blank=True, null=True)),
                ('acciones_tomadas', models.JSONField(blank=True, default=list)),
                ('evaluacion_resultado', models.TextField(blank=True, default='')),
                ('requiere_derivacion_externa', models.BooleanField(default=False)),
                ('detalles_derivacion_externa', models.TextField(blank=True, null=True)),
                ('retroalimentacion_apoderado', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('estudiante', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='intervenciones', to='students.estudiante')),
                ('informante', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='intervenciones_informadas', to=settings.AUTH_USER_MODEL)),
                ('responsable', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='intervenciones_asignadas', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Intervención',
                'verbose_name_plural': 'Intervenciones',
                'db_table': 'intervencion',
                'ordering': ['-fecha_reporte', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ComentarioIntervencion',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('contenido', models.TextField(max_length=1000)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('intervencion', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='comentarios', to='interventions.intervencion')),
                ('usuario', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='comentarios_intervencion', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Comentario de intervención',
                'verbose_name_plural': 'Comentarios de intervención',
                'db_table': 'comentario_intervencion',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
